"""Column types for JSON values persisted as text."""

from __future__ import annotations

import sqlalchemy as sa

from lifebook.core.storage.json_text import decode_list, decode_object, encode_list, encode_object


class JSONList(sa.types.TypeDecorator):
    """A list stored as JSON text in every backend."""

    impl = sa.Text
    cache_ok = True

    def process_bind_param(self, value, dialect):
        return None if value is None else encode_list(value)

    def process_result_value(self, value, dialect):
        return decode_list(value)


class JSONObject(sa.types.TypeDecorator):
    """A JSON object stored as text in every backend."""

    impl = sa.Text
    cache_ok = True

    def process_bind_param(self, value, dialect):
        return None if value is None else encode_object(value)

    def process_result_value(self, value, dialect):
        return decode_object(value)
