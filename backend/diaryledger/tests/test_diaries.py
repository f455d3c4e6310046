"""
Tests for diaries, their media and likes.
"""
import pytest
from diaryledger.models.diary import DiaryImage, DiaryLike, DiaryTag, DiaryUser
from diaryledger.services import diary_service, media_service, permission_service
from diaryledger.services.exceptions import (
    AlreadyLikedError,
    ForbiddenError,
    InvalidArgumentError,
    NotFoundError,
    NotLikedError,
)


@pytest.fixture
def diary(db, alice, make_tag):
    tag = make_tag("travel", "diary")
    return diary_service.create_diary(
        db, alice.id, "Beach", "Waves all day",
        address="Coast road",
        tag_ids=[tag.id],
        image_urls=["https://img/1.jpg", "https://img/2.jpg"],
        video_urls=["https://vid/1.mp4"]
    )


def test_create_diary_details(db, alice, diary):
    details = diary_service.get_diary_details(db, diary.id, alice.id)
    assert details.diary.title == "Beach"
    assert [t.tag_name for t in details.tags] == ["travel"]
    assert details.permission.name == "private"
    assert len(details.images) == 2
    assert len(details.videos) == 1
    assert details.liked is False
    assert permission_service.resolve_diary_creator(db, diary.id) == alice.id


def test_create_diary_rejects_bad_input(db, alice, make_tag):
    bill_tag = make_tag("food", "bill")
    with pytest.raises(InvalidArgumentError):
        diary_service.create_diary(db, alice.id, "x", "y", tag_ids=[bill_tag.id])
    with pytest.raises(InvalidArgumentError):
        diary_service.create_diary(db, alice.id, "x", "y", permission_level="everyone")


def test_every_read_counts_a_pageview(db, alice, diary):
    diary_service.get_diary_details(db, diary.id, alice.id)
    details = diary_service.get_diary_details(db, diary.id, alice.id)
    assert details.diary.pageview == 2


def test_private_diary_hidden_from_outsiders(db, bob, diary):
    with pytest.raises(ForbiddenError):
        diary_service.get_diary_details(db, diary.id, bob.id)


def test_public_diary_readable_by_anyone(db, alice, bob, diary):
    diary_service.update_diary(db, diary.id, alice.id, permission_level="public")
    details = diary_service.get_diary_details(db, diary.id, bob.id)
    assert details.permission.name == "public"
    # Reading does not make the reader an associate
    assert not permission_service.check_diary_access(db, diary.id, bob.id)


def test_missing_diary(db, alice):
    with pytest.raises(NotFoundError):
        diary_service.get_diary_details(db, "missing", alice.id)


def test_update_keeps_collections_when_omitted(db, alice, diary):
    diary_service.update_diary(db, diary.id, alice.id, fields={"title": "Beach day"})
    details = diary_service.get_diary_details(db, diary.id, alice.id)
    assert details.diary.title == "Beach day"
    assert details.diary.content == "Waves all day"
    assert len(details.tags) == 1
    assert len(details.images) == 2


def test_update_replaces_collections(db, alice, diary):
    diary_service.update_diary(
        db, diary.id, alice.id,
        tag_ids=[],
        image_urls=["https://img/3.jpg"],
        video_urls=[]
    )
    details = diary_service.get_diary_details(db, diary.id, alice.id)
    assert details.tags == []
    assert [i.image_url for i in details.images] == ["https://img/3.jpg"]
    assert details.videos == []


def test_update_rejects_unknown_field(db, alice, diary):
    with pytest.raises(InvalidArgumentError):
        diary_service.update_diary(db, diary.id, alice.id, fields={"pageview": 100})


def test_shared_user_can_edit_but_not_delete(db, alice, bob, diary):
    permission_service.share_diary(db, diary.id, alice.id, bob.id)
    updated = diary_service.update_diary(db, diary.id, bob.id, fields={"content": "Edited"})
    assert updated.content == "Edited"

    with pytest.raises(ForbiddenError):
        diary_service.delete_diary(db, diary.id, bob.id)


def test_outsider_cannot_edit(db, bob, diary):
    with pytest.raises(ForbiddenError):
        diary_service.update_diary(db, diary.id, bob.id, fields={"title": "Mine"})


def test_delete_diary_removes_everything(db, alice, bob, diary):
    permission_service.share_diary(db, diary.id, alice.id, bob.id)
    diary_service.like_diary(db, diary.id, bob.id)
    diary_service.delete_diary(db, diary.id, alice.id)

    assert db.query(DiaryUser).count() == 0
    assert db.query(DiaryTag).count() == 0
    assert db.query(DiaryImage).count() == 0
    assert db.query(DiaryLike).count() == 0


def test_list_diaries_filters(db, alice, bob, diary, make_tag):
    diary_service.create_diary(db, alice.id, "Work", "Meetings", permission_level="public")
    diary_service.create_diary(db, bob.id, "Bob's", "Not alice's")

    diaries, total = diary_service.list_diaries(db, alice.id)
    assert total == 2

    diaries, total = diary_service.list_diaries(db, alice.id, keyword="Meet")
    assert [d.title for d in diaries] == ["Work"]

    diaries, total = diary_service.list_diaries(db, alice.id, permission_level="private")
    assert [d.id for d in diaries] == [diary.id]

    tag_id = diary_service.get_diary_details(db, diary.id, alice.id).tags[0].id
    diaries, total = diary_service.list_diaries(db, alice.id, tag_ids=[tag_id])
    assert [d.id for d in diaries] == [diary.id]


def test_like_and_unlike(db, alice, bob, diary):
    liked = diary_service.like_diary(db, diary.id, bob.id)
    assert liked.like_count == 1
    assert diary_service.check_liked(db, diary.id, bob.id)
    assert not diary_service.check_liked(db, diary.id, alice.id)

    diary_service.like_diary(db, diary.id, alice.id)
    unliked = diary_service.unlike_diary(db, diary.id, bob.id)
    assert unliked.like_count == 1
    assert db.query(DiaryLike).filter(DiaryLike.diary_id == diary.id).count() == unliked.like_count


def test_like_twice_rejected(db, bob, diary):
    diary_service.like_diary(db, diary.id, bob.id)
    with pytest.raises(AlreadyLikedError):
        diary_service.like_diary(db, diary.id, bob.id)
    assert diary_service.get_diary_or_404(db, diary.id).like_count == 1


def test_unlike_without_like_rejected(db, bob, diary):
    with pytest.raises(NotLikedError):
        diary_service.unlike_diary(db, diary.id, bob.id)
    assert diary_service.get_diary_or_404(db, diary.id).like_count == 0


def test_like_missing_diary(db, bob):
    with pytest.raises(NotFoundError):
        diary_service.like_diary(db, "missing", bob.id)


def test_media_management(db, alice, bob, diary):
    image = media_service.add_image(db, diary.id, alice.id, "https://img/9.jpg")
    assert len(media_service.list_images(db, diary.id, alice.id)) == 3

    with pytest.raises(ForbiddenError):
        media_service.delete_image(db, image.id, bob.id)

    media_service.delete_image(db, image.id, alice.id)
    assert len(media_service.list_images(db, diary.id, alice.id)) == 2

    video = media_service.add_video(db, diary.id, alice.id, "https://vid/2.mp4")
    media_service.delete_video(db, video.id, alice.id)
    assert len(media_service.list_videos(db, diary.id, alice.id)) == 1

    with pytest.raises(NotFoundError):
        media_service.delete_video(db, "missing", alice.id)


def test_update_clears_address(db, alice, diary):
    updated = diary_service.update_diary(db, diary.id, alice.id, fields={"address": None})
    assert updated.address is None
    assert updated.title == "Beach"


def test_update_rejects_null_title(db, alice, diary):
    with pytest.raises(InvalidArgumentError):
        diary_service.update_diary(db, diary.id, alice.id, fields={"title": None})
