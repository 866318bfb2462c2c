from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CatalogRecord(BaseModel):
    """Base for records exchanged with callers.

    Attributes are snake_case in Python and camelCase on the wire
    (``knownName``, ``filesHash``); both spellings are accepted on input.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)
