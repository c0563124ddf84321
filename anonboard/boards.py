from dataclasses import asdict, dataclass
from typing import Dict, List
from urllib.parse import unquote


@dataclass(frozen=True)
class BoardInfo:
    slug: str   # value used in URLs
    title: str  # display name
    db: str     # value stored in posts.board / comments.board

    def as_dict(self) -> Dict[str, str]:
        return asdict(self)


WHO_BOARD = "이 사람 어때?"

BOARD_MAP: Dict[str, BoardInfo] = {
    "징벌": BoardInfo("징벌", "징벌", "징벌"),
    "주행": BoardInfo("주행", "주행", "주행"),
    WHO_BOARD: BoardInfo(WHO_BOARD, WHO_BOARD, WHO_BOARD),
    "who": BoardInfo("who", WHO_BOARD, WHO_BOARD),
}

HOME_BOARDS: List[Dict[str, str]] = [
    {"name": "징벌", "desc": "징벌 플레이/루트/타이밍 토론"},
    {"name": "일반", "desc": "일반 차사 운영/생존/상대법"},
    {"name": "논란", "desc": "이슈 정리(팩트 기반)"},
    {"name": "메타", "desc": "패치 후 메타/빌드 분석"},
]

# ops dashboard tabs when no trend rows exist yet
DEFAULT_OPS_BOARDS = ["징벌", "주행", "메타", "자유"]


def safe_decode(value: str) -> str:
    try:
        return unquote(value, errors="strict")
    except UnicodeDecodeError:
        return value


def resolve_board(raw: str) -> BoardInfo:
    decoded = safe_decode((raw or "").strip()).strip()
    if not decoded:
        return BoardInfo("unknown", "unknown", "unknown")
    hit = BOARD_MAP.get(decoded)
    if hit is not None:
        return hit
    return BoardInfo(decoded, decoded, decoded)


def home_boards() -> List[Dict[str, str]]:
    return [dict(b, slug=resolve_board(b["name"]).slug) for b in HOME_BOARDS]
