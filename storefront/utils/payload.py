from flask import request


def request_data(allow_form: bool = False) -> dict:
    """
    The request body as a dict.

    A JSON body that is not an object counts as empty, so route validation
    answers it with a 400. With ``allow_form`` a form-encoded body is used
    when there is no JSON object.
    """
    data = request.get_json(silent=True)
    if isinstance(data, dict):
        return data
    return request.form.to_dict() if allow_form else {}
