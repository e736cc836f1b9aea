"""
Configuration for decoding and JSON Schema conversion.
"""

from __future__ import annotations

from dataclasses import dataclass

DRAFT_2020_12 = "https://json-schema.org/draft/2020-12/schema"


@dataclass
class CodecConfig:
    """Configuration options for the engine and the JSON Schema codec."""

    # Deepest nesting a single decode may descend before failing
    max_depth: int = 200

    # Validate introspected ASTs against AST_SCHEMA before converting them
    validate_ast: bool = True

    # Discriminator name used when oneOf alternatives carry no const property
    default_discriminator: str = "type"

    # Item type assumed for JSON Schema arrays without "items"
    default_item_type: str = "string"

    # Value of "$schema" added to generated documents that carry an "$id"
    draft_uri: str = DRAFT_2020_12

    # Add a "$comment" with the generating command line (CLI only)
    add_generation_comment: bool = False

    @staticmethod
    def from_dict(d: dict) -> CodecConfig:
        """Create a config from a dictionary."""
        config = CodecConfig()
        for k, v in d.items():
            if hasattr(config, k):
                setattr(config, k, v)
        return config

    def to_dict(self) -> dict:
        """Convert config to a dictionary."""
        return {
            "max_depth": self.max_depth,
            "validate_ast": self.validate_ast,
            "default_discriminator": self.default_discriminator,
            "default_item_type": self.default_item_type,
            "draft_uri": self.draft_uri,
            "add_generation_comment": self.add_generation_comment,
        }


DEFAULT_CONFIG = CodecConfig()
