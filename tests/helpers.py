from manupedia.core.security import create_access_token
from manupedia.models import User
from manupedia.schemas.manuscript import Attachment, ManuscriptFields

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 32
JPEG_BYTES = b"\xff\xd8\xff\xe0" + b"\x00" * 32


def auth_headers(user: User) -> dict:
    return {"Authorization": f"Bearer {create_access_token(user)}"}


def make_fields(title="Radio Manual", **overrides) -> ManuscriptFields:
    return ManuscriptFields(title=title, **overrides)


def png_attachment(filename="scan.png") -> Attachment:
    return Attachment(content=PNG_BYTES, content_type="image/png", filename=filename)
