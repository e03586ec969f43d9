"""Naming collaborator for recordkit.

The core only asks two questions of a naming object: the human label for an
attribute and the model name of the type. DefaultNaming answers both with
plain English heuristics; applications plug in their own implementation for
translation.
"""

import re
from dataclasses import dataclass
from typing import Any, Protocol


class Naming(Protocol):
    """Protocol for label and model name lookups."""

    def human_attribute_name(self, attribute: str, **options: Any) -> str:
        ...

    def model_name(self) -> "ModelName":
        ...


@dataclass(frozen=True)
class ModelName:
    """Names derived from a record type name (e.g. "BlogPost").

    Attributes:
        name: The type name as given ("BlogPost")
        singular: Underscored singular ("blog_post")
        plural: Underscored plural ("blog_posts")
        element: Singular element name ("blog_post")
        human: Display name ("Blog post")
        route_key: Collection route fragment ("blog_posts")
        singular_route_key: Member route fragment ("blog_post")
        param_key: Key for nested parameters ("blog_post")
        i18n_key: Lookup key for translations ("blog_post")
    """

    name: str
    singular: str
    plural: str
    element: str
    human: str
    route_key: str
    singular_route_key: str
    param_key: str
    i18n_key: str

    @classmethod
    def from_name(cls, name: str) -> "ModelName":
        singular = underscore(name.split(".")[-1])
        plural = pluralize(singular)
        return cls(
            name=name,
            singular=singular,
            plural=plural,
            element=singular,
            human=humanize(singular),
            route_key=plural,
            singular_route_key=singular,
            param_key=singular,
            i18n_key=singular,
        )

    def __str__(self) -> str:
        return self.name


def underscore(name: str) -> str:
    """Convert CamelCase or camelCase to snake_case."""
    result = re.sub(r"([A-Z]+)([A-Z][a-z])", r"\1_\2", name)
    result = re.sub(r"([a-z\d])([A-Z])", r"\1_\2", result)
    return result.replace("-", "_").lower()


def humanize(name: str) -> str:
    """Convert an attribute or type name into a display label.

    "first_name" and "firstName" both become "First name"; a trailing
    "_id" is dropped.
    """
    result = underscore(name)
    if result.endswith("_id") and len(result) > 3:
        result = result[:-3]
    result = result.replace("_", " ").strip()
    return result[:1].upper() + result[1:]


def pluralize(word: str) -> str:
    """Naive English pluralization."""
    if not word:
        return word
    if re.search(r"(s|x|z|ch|sh)$", word):
        return word + "es"
    if re.search(r"[^aeiou]y$", word):
        return word[:-1] + "ies"
    return word + "s"


class DefaultNaming:
    """Naming that humanizes attribute names, honouring explicit labels.

    Attributes:
        model: The record type name
        labels: Explicit attribute -> label overrides
    """

    def __init__(self, model: str, labels: dict[str, str] | None = None):
        self.model = model
        self.labels = dict(labels or {})
        self._model_name = ModelName.from_name(model)

    def human_attribute_name(self, attribute: str, **options: Any) -> str:
        if attribute in self.labels:
            return self.labels[attribute]
        return options.get("default") or humanize(attribute)

    def model_name(self) -> ModelName:
        return self._model_name
