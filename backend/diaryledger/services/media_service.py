"""
Diary media service: image and video URLs attached to diaries.

Any user associated with the diary may add, list or remove its media.
"""
from typing import List
from sqlalchemy.orm import Session
from diaryledger.models.diary import DiaryImage, DiaryVideo
from diaryledger.services.exceptions import NotFoundError
from diaryledger.services.permission_service import require_diary_access


def add_image(db: Session, diary_id: str, user_id: str, image_url: str) -> DiaryImage:
    require_diary_access(db, diary_id, user_id)
    image = DiaryImage(diary_id=diary_id, image_url=image_url)
    db.add(image)
    db.commit()
    db.refresh(image)
    return image


def list_images(db: Session, diary_id: str, user_id: str) -> List[DiaryImage]:
    require_diary_access(db, diary_id, user_id)
    return db.query(DiaryImage).filter(
        DiaryImage.diary_id == diary_id
    ).order_by(DiaryImage.created_at).all()


def delete_image(db: Session, image_id: str, user_id: str) -> None:
    image = db.query(DiaryImage).filter(DiaryImage.id == image_id).first()
    if not image:
        raise NotFoundError("Image not found")
    require_diary_access(db, image.diary_id, user_id)
    db.delete(image)
    db.commit()


def add_video(db: Session, diary_id: str, user_id: str, video_url: str) -> DiaryVideo:
    require_diary_access(db, diary_id, user_id)
    video = DiaryVideo(diary_id=diary_id, video_url=video_url)
    db.add(video)
    db.commit()
    db.refresh(video)
    return video


def list_videos(db: Session, diary_id: str, user_id: str) -> List[DiaryVideo]:
    require_diary_access(db, diary_id, user_id)
    return db.query(DiaryVideo).filter(
        DiaryVideo.diary_id == diary_id
    ).order_by(DiaryVideo.created_at).all()


def delete_video(db: Session, video_id: str, user_id: str) -> None:
    video = db.query(DiaryVideo).filter(DiaryVideo.id == video_id).first()
    if not video:
        raise NotFoundError("Video not found")
    require_diary_access(db, video.diary_id, user_id)
    db.delete(video)
    db.commit()
