"""
Asset categories handled by the storage API.

Each category describes one kind of owning entity: the form field that
carries its ID, where uploads are staged locally and under which prefix
they land in the bucket. Avatars and tutoring images share every code
path and differ only in this configuration.
"""
from dataclasses import dataclass
from typing import Dict


@dataclass(frozen=True)
class AssetCategory:
    """Configuration for one asset category."""
    name: str                    # URL segment, e.g. "avatars"
    label: str                   # Human readable, used in error messages
    entity_field: str            # Multipart form field with the owner ID
    staging_dir_name: str        # Subdirectory of the temp root
    key_prefix: str              # Bucket key prefix
    missing_entity_message: str  # 400 detail when the owner ID is missing


AVATARS = AssetCategory(
    name="avatars",
    label="avatar",
    entity_field="userId",
    staging_dir_name="avatar-profile",
    key_prefix="avatars",
    missing_entity_message="A user ID is required",
)

TUTORING_IMAGES = AssetCategory(
    name="tutoring-images",
    label="tutoring image",
    entity_field="tutoringId",
    staging_dir_name="tutoring-images",
    key_prefix="tutoring-images",
    missing_entity_message="A tutoring session ID is required",
)

CATEGORIES: Dict[str, AssetCategory] = {
    category.name: category for category in (AVATARS, TUTORING_IMAGES)
}
