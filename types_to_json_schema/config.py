"""
Configuration for the schema generator.
"""

from __future__ import annotations

from dataclasses import dataclass, field

# camelCase option names (as used in config files) -> attribute names
_CAMEL_CASE_KEYS = {
    "aliasRef": "alias_ref",
    "topRef": "top_ref",
    "defaultProps": "default_props",
    "noExtraProps": "no_extra_props",
    "propOrder": "prop_order",
    "typeOfKeyword": "type_of_keyword",
    "strictNullChecks": "strict_null_checks",
    "ignoreErrors": "ignore_errors",
    "validationKeywords": "validation_keywords",
    "excludePrivate": "exclude_private",
    "uniqueNames": "unique_names",
    "rejectDateType": "reject_date_type",
}


@dataclass
class GeneratorConfig:
    """Configuration options for schema generation."""

    # Reference named types through definitions instead of inlining them
    ref: bool = True

    # Reference type aliases by their alias name
    alias_ref: bool = False

    # Make the requested root type itself a $ref
    top_ref: bool = False

    # Add a title to every definition and property
    titles: bool = False

    # Add an empty defaultProperties list to objects
    default_props: bool = False

    # Forbid additional properties on objects
    no_extra_props: bool = False

    # Add propertyOrder to objects
    prop_order: bool = False

    # Emit {"typeof": "function"} for function types
    type_of_keyword: bool = False

    # Compute the required list of objects
    required: bool = False

    # Forwarded to the program front-end
    strict_null_checks: bool = False

    # Generate even if the program has diagnostics
    ignore_errors: bool = False

    # Extra documentation tags to copy into schemas
    validation_keywords: list[str] = field(default_factory=list)

    # Globs of files to restrict user symbols to
    include: list[str] = field(default_factory=list)

    # Skip private members
    exclude_private: bool = False

    # Suffix catalog names with a per-declaration hash
    unique_names: bool = False

    # Treat Date as an unsupported type
    reject_date_type: bool = False

    # Schema $id, also used as the $ref prefix
    id: str = ""

    # Output file (stdout if empty)
    out: str = ""

    @staticmethod
    def from_dict(d: dict) -> GeneratorConfig:
        """Create a config from a dictionary (camelCase or snake_case keys)."""
        config = GeneratorConfig()
        for k, v in d.items():
            k = _CAMEL_CASE_KEYS.get(k, k)
            if hasattr(config, k):
                setattr(config, k, v)
        return config

    def to_dict(self) -> dict:
        """Convert config to a dictionary."""
        return {
            "ref": self.ref,
            "alias_ref": self.alias_ref,
            "top_ref": self.top_ref,
            "titles": self.titles,
            "default_props": self.default_props,
            "no_extra_props": self.no_extra_props,
            "prop_order": self.prop_order,
            "type_of_keyword": self.type_of_keyword,
            "required": self.required,
            "strict_null_checks": self.strict_null_checks,
            "ignore_errors": self.ignore_errors,
            "validation_keywords": self.validation_keywords,
            "include": self.include,
            "exclude_private": self.exclude_private,
            "unique_names": self.unique_names,
            "reject_date_type": self.reject_date_type,
            "id": self.id,
            "out": self.out,
        }
