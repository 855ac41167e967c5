# askdb/text.py


def strip_quotes(text: str) -> str:
    """
    Trims whitespace, then removes one '"' from each end if present.
    """
    text = text.strip()
    if text.startswith('"'):
        text = text[1:]
    if text.endswith('"'):
        text = text[:-1]
    return text


def cut_at_stop(text: str, stop: str) -> str:
    """
    Keeps the text before the first `stop`, for clients that do not apply
    stop sequences themselves.
    """
    if not stop:
        return text
    return text.split(stop, 1)[0]
