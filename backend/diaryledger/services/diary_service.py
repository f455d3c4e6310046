"""
Diary service for diary-related business logic.
"""
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Tuple
from sqlalchemy.orm import Session
from sqlalchemy import or_
from diaryledger.core.utils import normalize_pagination
from diaryledger.models.diary import (
    Diary, DiaryUser, DiaryPermission, DiaryTag, DiaryImage, DiaryVideo, DiaryLike
)
from diaryledger.models.permission import Permission, PermissionLevel
from diaryledger.models.tag import Tag, TagCategory
from diaryledger.services.exceptions import (
    AlreadyLikedError,
    ForbiddenError,
    InvalidArgumentError,
    NotLikedError,
)
from diaryledger.services.permission_service import (
    check_diary_access,
    get_diary_or_404,
    require_diary_access,
    resolve_diary_creator,
)
from diaryledger.services.tag_service import resolve_tags

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = ("title", "content", "address")
NULLABLE_FIELDS = ("address",)


@dataclass
class DiaryDetails:
    diary: Diary
    tags: List[Tag] = field(default_factory=list)
    permission: Optional[Permission] = None
    images: List[DiaryImage] = field(default_factory=list)
    videos: List[DiaryVideo] = field(default_factory=list)
    liked: bool = False


def validate_permission_level(level: str) -> str:
    try:
        return PermissionLevel(level).value
    except ValueError:
        raise InvalidArgumentError(f"Invalid permission level: {level}")


def ensure_permission_levels(db: Session) -> List[Permission]:
    """Make sure one row exists per permission level."""
    existing = {p.name: p for p in db.query(Permission).all()}
    missing = [level.value for level in PermissionLevel if level.value not in existing]
    for name in missing:
        permission = Permission(name=name)
        db.add(permission)
        existing[name] = permission
    if missing:
        db.flush()
    return [existing[level.value] for level in PermissionLevel]


def get_permission(db: Session, level: str) -> Permission:
    level = validate_permission_level(level)
    permission = db.query(Permission).filter(Permission.name == level).first()
    if permission is None:
        permission = next(p for p in ensure_permission_levels(db) if p.name == level)
    return permission


def _diary_permission_level(db: Session, diary_id: str) -> Optional[str]:
    row = db.query(Permission.name).join(
        DiaryPermission, DiaryPermission.permission_id == Permission.id
    ).filter(DiaryPermission.diary_id == diary_id).first()
    return row[0] if row else None


def _replace_tags(db: Session, diary_id: str, tags: Iterable[Tag]) -> None:
    db.query(DiaryTag).filter(DiaryTag.diary_id == diary_id).delete(synchronize_session=False)
    for tag in tags:
        db.add(DiaryTag(diary_id=diary_id, tag_id=tag.id))


def _replace_images(db: Session, diary_id: str, image_urls: Iterable[str]) -> None:
    db.query(DiaryImage).filter(DiaryImage.diary_id == diary_id).delete(synchronize_session=False)
    for url in image_urls:
        db.add(DiaryImage(diary_id=diary_id, image_url=url))


def _replace_videos(db: Session, diary_id: str, video_urls: Iterable[str]) -> None:
    db.query(DiaryVideo).filter(DiaryVideo.diary_id == diary_id).delete(synchronize_session=False)
    for url in video_urls:
        db.add(DiaryVideo(diary_id=diary_id, video_url=url))


def create_diary(
    db: Session,
    user_id: str,
    title: str,
    content: str,
    address: Optional[str] = None,
    permission_level: str = PermissionLevel.PRIVATE.value,
    tag_ids: Iterable[str] = (),
    image_urls: Iterable[str] = (),
    video_urls: Iterable[str] = (),
) -> Diary:
    """Create a diary with its creator link, permission, tags and media in one transaction."""
    permission = get_permission(db, permission_level)
    tags = resolve_tags(db, tag_ids, TagCategory.DIARY.value)

    diary = Diary(title=title, content=content, address=address)
    db.add(diary)
    db.flush()

    db.add(DiaryUser(diary_id=diary.id, user_id=user_id, is_creator=True))
    db.add(DiaryPermission(diary_id=diary.id, permission_id=permission.id))
    for tag in tags:
        db.add(DiaryTag(diary_id=diary.id, tag_id=tag.id))
    for url in image_urls:
        db.add(DiaryImage(diary_id=diary.id, image_url=url))
    for url in video_urls:
        db.add(DiaryVideo(diary_id=diary.id, video_url=url))

    db.commit()
    db.refresh(diary)

    logger.info("User %s created diary %s", user_id, diary.id)
    return diary


def get_diary_details(db: Session, diary_id: str, user_id: str) -> DiaryDetails:
    """
    Get a diary with tags, permission and media.

    Readable by associated users, or by anyone when the diary is public.
    Every successful read counts one page view.
    """
    diary = get_diary_or_404(db, diary_id)
    level = _diary_permission_level(db, diary_id)

    if not check_diary_access(db, diary_id, user_id) and level != PermissionLevel.PUBLIC.value:
        logger.warning("User %s denied access to diary %s", user_id, diary_id)
        raise ForbiddenError("Access denied to this diary")

    db.query(Diary).filter(Diary.id == diary_id).update(
        {Diary.pageview: Diary.pageview + 1}, synchronize_session=False
    )
    db.commit()
    db.refresh(diary)

    tags = db.query(Tag).join(
        DiaryTag, DiaryTag.tag_id == Tag.id
    ).filter(DiaryTag.diary_id == diary_id).order_by(Tag.tag_name).all()
    permission = db.query(Permission).filter(Permission.name == level).first() if level else None
    images = db.query(DiaryImage).filter(DiaryImage.diary_id == diary_id).order_by(DiaryImage.created_at).all()
    videos = db.query(DiaryVideo).filter(DiaryVideo.diary_id == diary_id).order_by(DiaryVideo.created_at).all()

    return DiaryDetails(
        diary=diary,
        tags=tags,
        permission=permission,
        images=images,
        videos=videos,
        liked=check_liked(db, diary_id, user_id)
    )


def list_diaries(
    db: Session,
    user_id: str,
    page: int = 1,
    page_size: int = 10,
    keyword: Optional[str] = None,
    tag_ids: Iterable[str] = (),
    permission_level: Optional[str] = None,
) -> Tuple[List[Diary], int]:
    """List diaries the user is associated with, newest first."""
    page, page_size = normalize_pagination(page, page_size)

    query = db.query(Diary).join(
        DiaryUser, DiaryUser.diary_id == Diary.id
    ).filter(DiaryUser.user_id == user_id)

    if permission_level:
        level = validate_permission_level(permission_level)
        query = query.join(
            DiaryPermission, DiaryPermission.diary_id == Diary.id
        ).join(
            Permission, Permission.id == DiaryPermission.permission_id
        ).filter(Permission.name == level)

    if keyword:
        pattern = f"%{keyword}%"
        query = query.filter(or_(Diary.title.like(pattern), Diary.content.like(pattern)))

    wanted_tags = list(dict.fromkeys(tag_ids or ()))
    if wanted_tags:
        tagged = db.query(DiaryTag.diary_id).filter(DiaryTag.tag_id.in_(wanted_tags))
        query = query.filter(Diary.id.in_(tagged))

    total = query.count()
    diaries = query.order_by(
        Diary.created_at.desc(),
        Diary.id
    ).offset((page - 1) * page_size).limit(page_size).all()
    return diaries, total


def update_diary(
    db: Session,
    diary_id: str,
    user_id: str,
    fields: Optional[Dict[str, Any]] = None,
    permission_level: Optional[str] = None,
    tag_ids: Optional[Iterable[str]] = None,
    image_urls: Optional[Iterable[str]] = None,
    video_urls: Optional[Iterable[str]] = None,
) -> Diary:
    """
    Update a diary. Any associated user may edit.

    ``fields`` holds new values for title, content and address; a field
    left out keeps its value and address may be set to None to clear it.
    A collection argument left as None is untouched; a list replaces the
    whole collection.
    """
    diary = require_diary_access(db, diary_id, user_id)

    changes = {}
    for name, value in (fields or {}).items():
        if name not in EDITABLE_FIELDS:
            raise InvalidArgumentError(f"Field cannot be updated: {name}")
        if value is None and name not in NULLABLE_FIELDS:
            raise InvalidArgumentError(f"Field cannot be empty: {name}")
        changes[getattr(Diary, name)] = value

    permission = get_permission(db, permission_level) if permission_level is not None else None
    tags = resolve_tags(db, tag_ids, TagCategory.DIARY.value) if tag_ids is not None else None

    if changes:
        db.query(Diary).filter(Diary.id == diary_id).update(changes, synchronize_session="fetch")

    if permission is not None:
        link = db.query(DiaryPermission).filter(DiaryPermission.diary_id == diary_id).first()
        if link:
            link.permission_id = permission.id
        else:
            db.add(DiaryPermission(diary_id=diary_id, permission_id=permission.id))

    if tags is not None:
        _replace_tags(db, diary_id, tags)
    if image_urls is not None:
        _replace_images(db, diary_id, image_urls)
    if video_urls is not None:
        _replace_videos(db, diary_id, video_urls)

    db.commit()
    db.refresh(diary)
    return diary


def delete_diary(db: Session, diary_id: str, user_id: str) -> None:
    """Delete a diary and everything attached to it. Creator only."""
    diary = get_diary_or_404(db, diary_id)
    if resolve_diary_creator(db, diary_id) != user_id:
        logger.warning("User %s tried to delete diary %s without being its creator", user_id, diary_id)
        raise ForbiddenError("Only the creator can delete this diary")

    db.delete(diary)
    db.commit()
    logger.info("User %s deleted diary %s", user_id, diary_id)


# Likes

def check_liked(db: Session, diary_id: str, user_id: str) -> bool:
    """Return True if the user has liked the diary."""
    return db.query(DiaryLike.id).filter(
        DiaryLike.diary_id == diary_id,
        DiaryLike.user_id == user_id
    ).first() is not None


def like_diary(db: Session, diary_id: str, user_id: str) -> Diary:
    """Record a like and bump the diary's like counter in one transaction."""
    diary = get_diary_or_404(db, diary_id)
    if check_liked(db, diary_id, user_id):
        raise AlreadyLikedError("Diary already liked")

    db.add(DiaryLike(diary_id=diary_id, user_id=user_id))
    db.query(Diary).filter(Diary.id == diary_id).update(
        {Diary.like_count: Diary.like_count + 1}, synchronize_session=False
    )
    db.commit()
    db.refresh(diary)
    return diary


def unlike_diary(db: Session, diary_id: str, user_id: str) -> Diary:
    """Remove a like and decrement the counter, never below zero."""
    diary = get_diary_or_404(db, diary_id)

    removed = db.query(DiaryLike).filter(
        DiaryLike.diary_id == diary_id,
        DiaryLike.user_id == user_id
    ).delete(synchronize_session=False)
    if removed == 0:
        raise NotLikedError("Diary not liked yet")

    db.query(Diary).filter(
        Diary.id == diary_id,
        Diary.like_count > 0
    ).update({Diary.like_count: Diary.like_count - 1}, synchronize_session=False)
    db.commit()
    db.refresh(diary)
    return diary
