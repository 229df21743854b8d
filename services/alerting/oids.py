"""
OID validation helpers.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

import re
from typing import Optional

from services.alerting.errors import MalformedOIDError

_OID_PATTERN = re.compile(r"^[0-9]+(\.[0-9]+)*$")


def is_oid(text: Optional[str]) -> bool:
    if not isinstance(text, str):
        return False
    return _OID_PATTERN.fullmatch(text) is not None


def require_oid(text: Optional[str]) -> str:
    if not is_oid(text):
        raise MalformedOIDError(str(text))
    return text


def join_oid(base_oid: str, sub_oid: int) -> str:
    return f"{base_oid}.{sub_oid}"
