"""
Read views over posts, comment threads, likes and follows.

Comment threads are stored as flat rows with a nullable ``parent_id``. They
are turned into nested trees here, per request, with a two-pass build:

1. index every comment by id and group child ids under their parent id;
2. walk down from the top-level comments with an explicit stack.

Only comments reachable from a top-level comment end up in the tree, so a
row whose parent chain never reaches the post (a dangling parent id or a
cycle) is dropped and logged instead of being looped over. Nothing here is
cached; every call reflects the latest committed writes.
"""

import logging
from collections import defaultdict
from typing import Dict, Iterable, List, Optional, Set, Tuple
from sqlalchemy import func
from sqlalchemy.orm import Session
from poetportal.crud import follow
from poetportal.crud.post import get_post
from poetportal.db.models.comment import Comment
from poetportal.db.models.follow import Follow
from poetportal.db.models.like import Like, LikeTarget
from poetportal.db.models.post import Post
from poetportal.db.models.user import User
from poetportal.schemas.comment import CommentNode
from poetportal.schemas.follow import FollowStatus
from poetportal.schemas.post import PostView
from poetportal.schemas.user import UserProfile, UserSummary

# Comments at this depth (0 = top level) no longer offer a reply action
MAX_REPLY_DEPTH = 3


def _sibling_key(comment):
    return (comment.created_at, comment.id)


def _index_thread(comments: Iterable) -> Tuple[Dict[int, object], Dict[Optional[int], List[int]]]:
    by_id = {}
    children = defaultdict(list)
    for comment in comments:
        by_id[comment.id] = comment
    for comment in by_id.values():
        children[comment.parent_id].append(comment.id)
    for parent_id, child_ids in children.items():
        child_ids.sort(key=lambda cid: _sibling_key(by_id[cid]))
    return by_id, children


def collect_subtree(comments: Iterable, root_id: int) -> List[int]:
    """Ids of ``root_id`` and every comment below it, root first."""
    _, children = _index_thread(comments)
    found = []
    seen = set()
    stack = [root_id]
    while stack:
        comment_id = stack.pop()
        if comment_id in seen:
            continue
        seen.add(comment_id)
        found.append(comment_id)
        stack.extend(children.get(comment_id, []))
    return found


def build_comment_forest(
    comments: Iterable,
    authors: Optional[Dict[int, User]] = None,
    like_counts: Optional[Dict[int, int]] = None,
    liked: Optional[Set[int]] = None,
) -> List[CommentNode]:
    authors = authors or {}
    like_counts = like_counts or {}
    liked = liked or set()
    by_id, children = _index_thread(comments)

    def make_node(comment, depth):
        author = authors.get(comment.user_id)
        return CommentNode(
            id=comment.id,
            post_id=comment.post_id,
            user_id=comment.user_id,
            parent_id=comment.parent_id,
            content=comment.content,
            created_at=comment.created_at,
            author=UserSummary.model_validate(author) if author is not None else None,
            depth=depth,
            can_reply=depth < MAX_REPLY_DEPTH,
            like_count=like_counts.get(comment.id, 0),
            liked_by_me=comment.id in liked,
        )

    roots = [make_node(by_id[cid], 0) for cid in children.get(None, [])]
    placed = {node.id for node in roots}
    stack = list(roots)
    while stack:
        node = stack.pop()
        for child_id in children.get(node.id, []):
            if child_id in placed:
                continue
            child = make_node(by_id[child_id], node.depth + 1)
            placed.add(child_id)
            node.replies.append(child)
            stack.append(child)

    dropped = set(by_id) - placed
    if dropped:
        logging.warning(
            f"Dropped {len(dropped)} comment(s) with a broken parent chain: {sorted(dropped)}"
        )
    return roots


def _like_counts(db: Session, target_type: LikeTarget, target_ids: List[int]) -> Dict[int, int]:
    if not target_ids:
        return {}
    rows = db.query(Like.target_id, func.count(Like.id))\
        .filter(Like.target_type == target_type, Like.target_id.in_(target_ids))\
        .group_by(Like.target_id)\
        .all()
    return {target_id: count for target_id, count in rows}


def _liked_by(db: Session, viewer_id: Optional[int], target_type: LikeTarget, target_ids: List[int]) -> Set[int]:
    if viewer_id is None or not target_ids:
        return set()
    rows = db.query(Like.target_id).filter(
        Like.user_id == viewer_id,
        Like.target_type == target_type,
        Like.target_id.in_(target_ids),
    )
    return {row.target_id for row in rows}


def _assemble(db: Session, posts: List[Post], viewer_id: Optional[int]) -> List[PostView]:
    if not posts:
        return []
    post_ids = [post.id for post in posts]

    comments = db.query(Comment).filter(Comment.post_id.in_(post_ids)).all()
    comment_ids = [comment.id for comment in comments]

    author_ids = {post.user_id for post in posts} | {comment.user_id for comment in comments}
    authors = {user.id: user for user in db.query(User).filter(User.id.in_(author_ids))}

    post_likes = _like_counts(db, LikeTarget.post, post_ids)
    comment_likes = _like_counts(db, LikeTarget.comment, comment_ids)
    post_liked = _liked_by(db, viewer_id, LikeTarget.post, post_ids)
    comment_liked = _liked_by(db, viewer_id, LikeTarget.comment, comment_ids)

    threads = defaultdict(list)
    for comment in comments:
        threads[comment.post_id].append(comment)

    views = []
    for post in posts:
        thread = threads.get(post.id, [])
        views.append(PostView(
            id=post.id,
            user_id=post.user_id,
            title=post.title,
            content=post.content,
            created_at=post.created_at,
            author=UserSummary.model_validate(authors[post.user_id]),
            like_count=post_likes.get(post.id, 0),
            liked_by_me=post.id in post_liked,
            comment_count=len(thread),
            comments=build_comment_forest(thread, authors, comment_likes, comment_liked),
        ))
    return views


def list_posts_with_engagement(db: Session, viewer_id: Optional[int] = None) -> List[PostView]:
    posts = db.query(Post).order_by(Post.created_at.desc(), Post.id.desc()).all()
    return _assemble(db, posts, viewer_id)


def get_post_with_engagement(db: Session, post_id: int, viewer_id: Optional[int] = None) -> PostView:
    return _assemble(db, [get_post(db, post_id)], viewer_id)[0]


def follow_counts(db: Session, user_id: int) -> Tuple[int, int]:
    followers = db.query(func.count(Follow.id)).filter(Follow.followed_id == user_id).scalar()
    following = db.query(func.count(Follow.id)).filter(Follow.follower_id == user_id).scalar()
    return followers or 0, following or 0


def follow_relationship(db: Session, viewer_id: int, subject_id: int) -> FollowStatus:
    followers, following = follow_counts(db, subject_id)
    return FollowStatus(
        is_following=follow.is_following(db, viewer_id, subject_id),
        followers_count=followers,
        following_count=following,
    )


def user_profile(db: Session, user: User, viewer_id: Optional[int] = None) -> UserProfile:
    followers, following = follow_counts(db, user.id)
    posts_count = db.query(func.count(Post.id)).filter(Post.user_id == user.id).scalar() or 0
    profile = UserProfile.model_validate(user)
    profile.posts_count = posts_count
    profile.followers_count = followers
    profile.following_count = following
    if viewer_id is not None and viewer_id != user.id:
        profile.is_following = follow_relationship(db, viewer_id, user.id).is_following
    return profile
