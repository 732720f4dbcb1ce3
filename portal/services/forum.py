"""
forum.py - Community forum helpers
Single responsibility: shape forum posts and replies, and load or extend
one post's thread.
"""

import logging

from portal.config import ROLE_TEACHER
from portal.services.filter_options import Option, course_options, fetch_list
from portal.utils.time import parse_iso

logger = logging.getLogger(__name__)


def author_name(author) -> str:
    if not isinstance(author, dict):
        return "Unknown"
    user = author.get("user") if isinstance(author.get("user"), dict) else {}
    return author.get("fullName") or user.get("fullName") or "Unknown"


def course_label(course) -> str:
    if not isinstance(course, dict) or not course:
        return "General"
    return f"{course.get('code', '')} - {course.get('name', '')}"


def to_forum_post(post: dict) -> dict:
    row = dict(post)
    replies = post.get("replies")
    row.update(
        authorName=author_name(post.get("author")),
        courseLabel=course_label(post.get("course")),
        replyCount=len(replies) if isinstance(replies, list) else 0,
        views=post.get("views") or 0,
        isPinned=bool(post.get("isPinned")),
    )
    return row


def order_posts(posts: list[dict]) -> list[dict]:
    """Pinned posts first, each group newest first; undated posts last."""
    dated = sorted(
        (p for p in posts if parse_iso(p.get("createdAt"))),
        key=lambda p: parse_iso(p.get("createdAt")),
        reverse=True,
    )
    undated = [p for p in posts if not parse_iso(p.get("createdAt"))]
    return sorted(dated + undated, key=lambda p: not p.get("isPinned"))


def to_reply(reply: dict) -> dict:
    author = reply.get("author") if isinstance(reply.get("author"), dict) else {}
    user = author.get("user") if isinstance(author.get("user"), dict) else {}
    return {
        "id": reply.get("id"),
        "author": author_name(author),
        "content": reply.get("content") or "",
        "createdAt": reply.get("createdAt"),
        "isTeacher": ROLE_TEACHER in (author.get("role"), user.get("role")),
    }


async def load_post(client, post: dict) -> tuple[dict, list[dict]]:
    """
    Fetch one post with its replies. The listed post supplies fallbacks for
    fields the detail response leaves out. Raises ApiError.
    """
    body = await client.get(f"/forum/posts/{post['id']}")
    if not isinstance(body, dict):
        body = {}
    detail = dict(post)
    detail["content"] = body.get("content") or post.get("content")
    if body.get("author"):
        detail["authorName"] = author_name(body["author"])
    if body.get("course"):
        detail["courseLabel"] = course_label(body["course"])
    replies = body.get("replies") if isinstance(body.get("replies"), list) else []
    return detail, [to_reply(r) for r in replies if isinstance(r, dict)]


async def post_reply(client, post_id, payload: dict):
    return await client.post(f"/forum/posts/{post_id}/replies", payload)


async def load_course_options(client, is_teacher: bool) -> list[Option]:
    """Courses a new post may be tagged with: own courses for teachers, all otherwise."""
    path = "/courses/teacher/my-courses" if is_teacher else "/courses"
    return course_options(await fetch_list(client, path))
