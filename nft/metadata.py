"""
ARC NFT Metadata Resolver - ARC69 Metadata Validation

This module provides JSON schema validation for ARC69 note metadata and the
media type vocabularies shared by the ARC3, ARC19 and ARC69 conventions.
"""

from dataclasses import dataclass
from typing import Dict, List, Optional, Any

from jsonschema import Draft7Validator, ValidationError


IMAGE_MIME_TYPES = [
    "image/apng",
    "image/avif",
    "image/gif",
    "image/jpeg",
    "image/png",
    "image/svg+xml",
    "image/webp",
]

ANIMATION_MIME_TYPES = [
    "model/gltf-binary",
    "model/gltf+json",
    "video/webm",
    "video/mp4",
    "video/m4v",
    "video/ogg",
    "video/ogv",
    "audio/mpeg",
    "audio/mp3",
    "audio/wav",
    "audio/ogg",
    "audio/oga",
    "application/pdf",
    "text/html",
]


ARC69_SCHEMA = {
    "$schema": "http://json-schema.org/draft-07/schema#",
    "title": "ARC69 NFT Metadata",
    "type": "object",
    "required": ["standard"],
    "properties": {
        "standard": {
            "const": "arc69",
            "description": "Describes the standard used"
        },
        "description": {"type": "string"},
        "external_url": {"type": "string"},
        "media_url": {"type": "string"},
        "properties": {"type": "object"},
        "mime_type": {
            "enum": IMAGE_MIME_TYPES + ANIMATION_MIME_TYPES
        },
        "media_integrity": {"type": "string"},
        "attributes": {
            "type": "array",
            "items": {
                "type": "object",
                "required": ["trait_type", "value"],
                "properties": {
                    "trait_type": {"type": "string"},
                    "value": {"type": ["string", "number"]},
                    "display_type": {"type": "string"},
                    "max_value": {"type": "number"},
                    "probability": {"type": "number"}
                }
            }
        }
    },
    "additionalProperties": True
}


@dataclass
class ValidationResult:
    """Outcome of validating a metadata document."""

    is_valid: bool
    friendly_error_message: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        result = {"is_valid": self.is_valid}
        if self.friendly_error_message:
            result["friendly_error_message"] = self.friendly_error_message
        return result


class MetadataValidator:
    """Validates ARC69 metadata against its JSON schema."""

    def __init__(self, schema: Optional[Dict[str, Any]] = None):
        self.validator = Draft7Validator(schema or ARC69_SCHEMA)

    def validate(self, metadata: Any) -> bool:
        """
        Validate metadata, raising on the first error.

        Raises:
            ValidationError: If metadata is invalid
        """
        self.validator.validate(metadata)
        return True

    def get_validation_errors(self, metadata: Any) -> List[str]:
        """
        Get list of validation errors without raising exception.

        Returns:
            ``path: message`` strings, empty if valid
        """
        errors = sorted(self.validator.iter_errors(metadata),
                        key=lambda e: [str(p) for p in e.path])

        messages = []
        for error in errors:
            error_path = ".".join(str(p) for p in error.path) if error.path else "Value"
            messages.append(f"{error_path}: {error.message}")
        return messages

    def is_valid(self, metadata: Any) -> bool:
        """Check if metadata is valid without raising exceptions."""
        try:
            self.validate(metadata)
            return True
        except ValidationError:
            return False


def format_validation_errors(errors: List[str]) -> str:
    """Numbered, user-facing summary of validation errors."""
    issues = [f"{index}. {error}" for index, error in enumerate(errors, start=1)]
    return "Validation failed:\n" + "\n".join(issues)


def validate_arc69_metadata(metadata: Any) -> ValidationResult:
    """Validate an ARC69 document and describe any problems for display."""
    errors = MetadataValidator().get_validation_errors(metadata)
    if not errors:
        return ValidationResult(is_valid=True)
    return ValidationResult(is_valid=False, friendly_error_message=format_validation_errors(errors))
