"""
Field type tags.

The set of field types is closed: every lookup table in the validators
package is keyed by these members, and specifications naming any other
type are rejected when they are parsed.
"""

from enum import Enum


class FieldType(str, Enum):
    """Form field types"""
    TEXT = "text"
    TEXTAREA = "textarea"
    EMAIL = "email"
    PASSWORD = "password"
    SEARCH = "search"
    TEL = "tel"
    URL = "url"
    NUMBER = "number"
    DATE = "date"
    CHECKBOX = "checkbox"
    CHECKBOX_GROUP = "checkbox-group"
    RADIO_GROUP = "radio-group"
    SELECT = "select"
    GROUP = "group"


# Types whose value is a free-form string
TEXT_LIKE_TYPES = frozenset({
    FieldType.TEXT,
    FieldType.TEXTAREA,
    FieldType.EMAIL,
    FieldType.PASSWORD,
    FieldType.SEARCH,
    FieldType.TEL,
    FieldType.URL,
})

# Types whose constraints carry a list of {value, label} options
OPTION_TYPES = frozenset({
    FieldType.CHECKBOX_GROUP,
    FieldType.RADIO_GROUP,
    FieldType.SELECT,
})
