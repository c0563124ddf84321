from flask import request


def json_payload() -> dict:
    """JSON body, falling back to form fields; anything else reads as empty."""
    data = request.get_json(silent=True)
    if data is None:
        data = request.form.to_dict() if request.form else {}
    return data if isinstance(data, dict) else {}
