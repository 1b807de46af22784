"""Post service - posts, comments and reactions under events."""

import logging
from dataclasses import replace
from uuid import UUID

from community.domain import (
    Comment,
    CommentId,
    EntityNotFoundError,
    Event,
    EventId,
    InvalidArgumentError,
    Post,
    PostId,
    Reaction,
    ReactionId,
    ReactionType,
)
from community.domain.value_objects import as_uuid
from community.services import cascade
from community.services.base import BaseService

logger = logging.getLogger(__name__)


class PostService(BaseService):
    """Service for posts and the discussion under them."""

    def get_post(self, post_id: PostId | UUID) -> Post:
        self.allow_signed_in_users()

        return self.uow.repository(Post).get_or_raise(post_id)

    def get_users_posts(self, include_interested: bool = True) -> list[Post]:
        """Return posts of the events the acting user takes part in.

        With ``include_interested`` the events the user is interested in count too.
        """
        user = self.allow_signed_in_users()

        def follows(event: Event) -> bool:
            return user.id in event.participant_ids or (
                include_interested and user.id in event.interested_ids
            )

        followed = {event.id for event in self.uow.repository(Event).find(follows)}
        return self.uow.repository(Post).find(lambda post: post.event_id in followed)

    def create_post(self, event_id: EventId | UUID, content: str) -> Post:
        """Publish a post under an event.

        Raises:
            EntityNotFoundError: If the event does not exist.
            UserUnauthorizedError: If the acting user is neither organizer nor admin.
        """
        event = self.uow.repository(Event).get_or_raise(event_id)

        author = self.allow_only_user(event.organizer_id)

        post = Post(id=PostId.new(), event_id=event.id, author_id=author.id, content=content)
        self.uow.repository(Post).add(post)
        self.uow.commit()

        logger.info("Post %s published under event %s", post.id, event.id)
        return post

    def delete_post(self, post_id: PostId | UUID) -> None:
        """Delete a post with its comments, reactions and reports."""
        post = self.uow.repository(Post).get_or_raise(post_id)

        self.allow_only_user(post.author_id)

        removed = cascade.remove_post(self.uow, post)
        cascade.remove_reports_against(self.uow, removed)
        self.uow.commit()

    def get_comments(self, post_id: PostId | UUID) -> list[Comment]:
        """Return the top-level comments of a post."""
        self.allow_signed_in_users()

        post = self.uow.repository(Post).get_or_raise(post_id)
        return self.uow.repository(Comment).find(
            lambda c: c.post_id == post.id and c.in_response_to_id is None
        )

    def get_replies(self, comment_id: CommentId | UUID) -> list[Comment]:
        self.allow_signed_in_users()

        comment = self.uow.repository(Comment).get_or_raise(comment_id)
        return self.uow.repository(Comment).find(lambda c: c.in_response_to_id == comment.id)

    def add_comment(
        self,
        post_id: PostId | UUID,
        content: str,
        in_response_to_id: CommentId | UUID | None = None,
    ) -> Comment:
        """Comment on a post, optionally replying to one of its comments.

        Raises:
            EntityNotFoundError: If the post or the replied-to comment does not exist.
            InvalidArgumentError: If the replied-to comment belongs to another post.
        """
        author = self.allow_signed_in_users()

        post = self.uow.repository(Post).get_or_raise(post_id)
        parent_id = None
        if in_response_to_id is not None:
            parent = self.uow.repository(Comment).get_or_raise(in_response_to_id)
            if parent.post_id != post.id:
                raise InvalidArgumentError("Replied-to comment belongs to another post")
            parent_id = parent.id

        comment = Comment(
            id=CommentId.new(),
            post_id=post.id,
            author_id=author.id,
            content=content,
            in_response_to_id=parent_id,
        )
        self.uow.repository(Comment).add(comment)
        self.uow.commit()
        return comment

    def delete_comment(self, comment_id: CommentId | UUID) -> None:
        """Delete a comment with its replies, reactions and reports."""
        comment = self.uow.repository(Comment).get_or_raise(comment_id)

        self.allow_only_user(comment.author_id)

        removed = cascade.remove_comment(self.uow, comment)
        cascade.remove_reports_against(self.uow, removed)
        self.uow.commit()

    def get_reactions(self, target_id: PostId | CommentId | UUID) -> list[Reaction]:
        """Return every reaction on a post or comment."""
        self.allow_signed_in_users()

        target = self._resolve_target(target_id)
        return self.uow.repository(Reaction).find(lambda r: r.target == target)

    def set_reaction(
        self,
        target_id: PostId | CommentId | UUID,
        reaction_type: ReactionType | None,
    ) -> Reaction | None:
        """Set the acting user's reaction on a post or comment; None clears it.

        Raises:
            EntityNotFoundError: If no post or comment has that id.
        """
        user = self.allow_signed_in_users()

        target = self._resolve_target(target_id)
        repository = self.uow.repository(Reaction)
        existing = next(
            iter(repository.find(lambda r: r.target == target and r.author_id == user.id)),
            None,
        )

        reaction = None
        if reaction_type is None:
            if existing is not None:
                repository.delete(existing)
        elif existing is None:
            reaction = Reaction(id=ReactionId.new(), author_id=user.id, target=target, type=reaction_type)
            repository.add(reaction)
        else:
            reaction = replace(existing, type=reaction_type)
            repository.update(reaction)

        self.uow.commit()
        return reaction

    def _resolve_target(self, target_id: PostId | CommentId | UUID) -> PostId | CommentId:
        key = as_uuid(target_id)
        post = self.uow.repository(Post).get(key)
        if post is not None:
            return post.id
        comment = self.uow.repository(Comment).get(key)
        if comment is not None:
            return comment.id
        raise EntityNotFoundError(Post | Comment, target_id)
