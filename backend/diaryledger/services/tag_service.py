"""
Tag service for label management.
"""
import logging
from typing import Iterable, List, Optional
from sqlalchemy.orm import Session
from diaryledger.models.tag import Tag, TagCategory
from diaryledger.models.bill import BillTag
from diaryledger.models.diary import DiaryTag
from diaryledger.services.exceptions import (
    DuplicateTagError,
    InvalidArgumentError,
    InvalidCategoryError,
    NotFoundError,
    TagInUseError,
)

logger = logging.getLogger(__name__)

TAG_CATEGORIES = [category.value for category in TagCategory]


def validate_category(category: str) -> str:
    """Return the category if it is a known one, else raise InvalidCategoryError."""
    if category not in TAG_CATEGORIES:
        raise InvalidCategoryError(f"Invalid tag category: {category}")
    return category


def _find_duplicate(db: Session, name: str, category: str, exclude_id: Optional[str] = None) -> Optional[Tag]:
    query = db.query(Tag).filter(Tag.tag_name == name, Tag.category == category)
    if exclude_id:
        query = query.filter(Tag.id != exclude_id)
    return query.first()


def _reference_count(db: Session, tag_id: str) -> int:
    bill_refs = db.query(BillTag).filter(BillTag.tag_id == tag_id).count()
    diary_refs = db.query(DiaryTag).filter(DiaryTag.tag_id == tag_id).count()
    return bill_refs + diary_refs


def get_tag(db: Session, tag_id: str) -> Tag:
    tag = db.query(Tag).filter(Tag.id == tag_id).first()
    if not tag:
        raise NotFoundError("Tag not found")
    return tag


def list_tags(db: Session, category: Optional[str] = None) -> List[Tag]:
    """List tags, newest first, optionally restricted to one category."""
    query = db.query(Tag)
    if category:
        query = query.filter(Tag.category == validate_category(category))
    return query.order_by(Tag.created_at.desc(), Tag.id).all()


def create_tag(db: Session, name: str, type: str, category: str) -> Tag:
    """Create a tag; (name, category) must be unique."""
    validate_category(category)
    if _find_duplicate(db, name, category):
        raise DuplicateTagError(f"Tag '{name}' already exists in category '{category}'")

    tag = Tag(tag_name=name, type=type or "", category=category)
    db.add(tag)
    db.commit()
    db.refresh(tag)

    logger.info("Created %s tag %s (%s)", category, tag.id, name)
    return tag


def update_tag(db: Session, tag_id: str, name: str, type: str, category: str) -> Tag:
    """
    Update a tag; the new (name, category) may not collide with another tag.

    A tag attached to bills or diaries keeps its category.
    """
    tag = get_tag(db, tag_id)
    validate_category(category)
    if category != tag.category and _reference_count(db, tag_id) > 0:
        raise TagInUseError("Tag is in use and cannot change category")
    if _find_duplicate(db, name, category, exclude_id=tag_id):
        raise DuplicateTagError(f"Tag '{name}' already exists in category '{category}'")

    tag.tag_name = name
    tag.type = type or ""
    tag.category = category
    db.commit()
    db.refresh(tag)
    return tag


def delete_tag(db: Session, tag_id: str) -> None:
    """Delete a tag that no bill or diary references."""
    tag = get_tag(db, tag_id)

    if _reference_count(db, tag_id) > 0:
        raise TagInUseError("Tag is in use and cannot be deleted")

    db.delete(tag)
    db.commit()
    logger.info("Deleted tag %s", tag_id)


def resolve_tags(db: Session, tag_ids: Iterable[str], category: str) -> List[Tag]:
    """
    Load the given tags for attaching to a bill or diary.

    Duplicate ids are collapsed. Every id must exist and belong to the
    expected category.
    """
    unique_ids = list(dict.fromkeys(tag_ids))
    if not unique_ids:
        return []

    tags = db.query(Tag).filter(Tag.id.in_(unique_ids)).all()
    found = {tag.id: tag for tag in tags}
    for tag_id in unique_ids:
        if tag_id not in found:
            raise NotFoundError(f"Tag not found: {tag_id}")
        if found[tag_id].category != category:
            raise InvalidArgumentError(f"Tag {tag_id} is not a {category} tag")
    return [found[tag_id] for tag_id in unique_ids]
