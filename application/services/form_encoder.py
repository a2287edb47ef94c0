# application/services/form_encoder.py
from __future__ import annotations

from typing import List, Tuple
from urllib.parse import quote_plus

FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"

# CSV rosters are mostly commas, colons (ecdsa-koblitz-pubkey:...) and emails.
# They are legal in a form body and the endpoint reads them back as-is.
LITERAL_CHARS = ",:@/"


class FormEncoder:
    """
    Encode request bodies as application/x-www-form-urlencoded.

    - ``a,b,c`` stays ``a,b,c``; spaces become ``+``; ``&``, ``=``, ``+``, newlines are escaped
    - field order is preserved; duplicate names are sent as given
    """

    def __init__(self, literal_chars: str = LITERAL_CHARS):
        self._safe = literal_chars

    def encode_field(self, name: str, value: str) -> str:
        return self.encode([(name, value)])

    def encode(self, pairs: List[Tuple[str, str]]) -> str:
        return "&".join(
            f"{quote_plus(str(k), safe=self._safe)}={quote_plus('' if v is None else str(v), safe=self._safe)}"
            for k, v in pairs
        )
