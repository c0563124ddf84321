from anonboard.boards import WHO_BOARD, home_boards, resolve_board


def test_known_board():
    info = resolve_board("징벌")
    assert (info.slug, info.title, info.db) == ("징벌", "징벌", "징벌")


def test_alias_maps_to_db_name():
    info = resolve_board("who")
    assert info.slug == "who"
    assert info.db == WHO_BOARD


def test_url_encoded_name_is_decoded():
    assert resolve_board("%EC%A3%BC%ED%96%89").db == "주행"
    assert resolve_board("%EC%9D%B4%20%EC%82%AC%EB%9E%8C%20%EC%96%B4%EB%95%8C%3F").db == WHO_BOARD


def test_unknown_board_maps_to_itself():
    info = resolve_board("  자유 ")
    assert info.as_dict() == {"slug": "자유", "title": "자유", "db": "자유"}


def test_empty_board_is_unknown():
    assert resolve_board("").db == "unknown"
    assert resolve_board(None).slug == "unknown"


def test_broken_escape_is_left_alone():
    assert resolve_board("%E0%A4%A").db == "%E0%A4%A"


def test_home_boards_have_descriptions():
    boards = home_boards()
    assert [b["name"] for b in boards] == ["징벌", "일반", "논란", "메타"]
    assert all(b["desc"] for b in boards)
