"""HTTP handlers (views) - handle HTTP concerns only.

Handlers:
- Parse requests and validate input format
- Bind a service to the acting user of the request
- Call services for business logic
- Never contain business logic
- Leave domain error mapping to handlers.errors
"""

from django.utils import timezone
from rest_framework import exceptions, status
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from community.domain import EntityNotFoundError, Report, User
from community.domain.models import CommentReport, EventReport, PostReport
from community.domain.value_objects import ReportType
from community.handlers.auth import acting_user_id
from community.handlers.serializers import (
    AddCommentSerializer,
    AddFeedbackSerializer,
    AnswerReportSerializer,
    CommentSerializer,
    CreateEventSerializer,
    CreatePostSerializer,
    CreateReportSerializer,
    EventFiltersSerializer,
    EventSerializer,
    FeedbackSerializer,
    PagingSerializer,
    PostSerializer,
    ReactionSerializer,
    ReportSerializer,
    SetReactionSerializer,
    UserSerializer,
    paged_data,
)
from community.listing import Paged, creation_date_key, event_state_key, filter_events
from community.services import BaseService, EventService, PostService, ReportService, UserService
from community.stores.django_store import DjangoUnitOfWork
from community.stores.interfaces import UnitOfWork

REPORT_KINDS = {
    ReportType.EVENT.value: EventReport,
    ReportType.POST.value: PostReport,
    ReportType.COMMENT.value: CommentReport,
}


def _validated(serializer_class, data):
    serializer = serializer_class(data=data)
    serializer.is_valid(raise_exception=True)
    return serializer


class ServiceView(APIView):
    """Base view building a fresh service bound to the request's acting user."""

    service_class: type[BaseService]

    def unit_of_work(self) -> UnitOfWork:
        return DjangoUnitOfWork()

    def service(self):
        try:
            return self.service_class.as_user(self.unit_of_work(), acting_user_id(self.request))
        except EntityNotFoundError as exc:
            if exc.kind is User:
                raise exceptions.AuthenticationFailed("Unknown user") from exc
            raise

    def paging(self, request: Request):
        return _validated(PagingSerializer, request.query_params).to_paging()


class EventListView(ServiceView):
    """Handler for GET|POST /api/events"""

    service_class = EventService

    def get(self, request: Request) -> Response:
        filters = _validated(EventFiltersSerializer, request.query_params).to_filters()
        paging = self.paging(request)
        now = timezone.now()

        service = self.service()
        events = filter_events(service.get_all(), filters, service.get_organizers(), now)
        paged = Paged.page_from(events, event_state_key(now), paging)
        return Response(paged_data(paged, EventSerializer))

    def post(self, request: Request) -> Response:
        data = _validated(CreateEventSerializer, request.data).validated_data
        event = self.service().create_event(**data)
        return Response(EventSerializer(event).data, status=status.HTTP_201_CREATED)


class EventDetailView(ServiceView):
    """Handler for GET|DELETE /api/events/{event_id}"""

    service_class = EventService

    def get(self, request: Request, event_id) -> Response:
        return Response(EventSerializer(self.service().get_event(event_id)).data)

    def delete(self, request: Request, event_id) -> Response:
        self.service().delete_event(event_id)
        return Response(status=status.HTTP_204_NO_CONTENT)


class EventParticipantsView(ServiceView):
    """Handler for POST|DELETE /api/events/{event_id}/participants"""

    service_class = EventService

    def post(self, request: Request, event_id) -> Response:
        return Response(self.service().try_add_participant(event_id))

    def delete(self, request: Request, event_id) -> Response:
        return Response(self.service().try_remove_participant(event_id))


class EventInterestedView(ServiceView):
    """Handler for POST|DELETE /api/events/{event_id}/interested"""

    service_class = EventService

    def post(self, request: Request, event_id) -> Response:
        return Response(self.service().try_add_interested(event_id))

    def delete(self, request: Request, event_id) -> Response:
        return Response(self.service().try_remove_interested(event_id))


class EventFeedbackView(ServiceView):
    """Handler for POST /api/events/{event_id}/feedback"""

    service_class = EventService

    def post(self, request: Request, event_id) -> Response:
        data = _validated(AddFeedbackSerializer, request.data).validated_data
        feedback = self.service().add_feedback(event_id, data["rating"])
        return Response(FeedbackSerializer(feedback).data, status=status.HTTP_201_CREATED)


class EventPostsView(ServiceView):
    """Handler for GET /api/events/{event_id}/posts"""

    service_class = EventService

    def get(self, request: Request, event_id) -> Response:
        paging = self.paging(request)
        posts = self.service().get_event_posts(event_id)
        return Response(paged_data(Paged.page_from(posts, creation_date_key, paging), PostSerializer))


class PostListView(ServiceView):
    """Handler for POST /api/posts"""

    service_class = PostService

    def post(self, request: Request) -> Response:
        data = _validated(CreatePostSerializer, request.data).validated_data
        post = self.service().create_post(data["event_id"], data["content"])
        return Response(PostSerializer(post).data, status=status.HTTP_201_CREATED)


class UserPostsView(ServiceView):
    """Handler for GET /api/posts/user"""

    service_class = PostService

    def get(self, request: Request) -> Response:
        paging = self.paging(request)
        include_interested = request.query_params.get("show_also_interested", "").lower() in {"1", "true"}
        posts = self.service().get_users_posts(include_interested=include_interested)
        return Response(paged_data(Paged.page_from(posts, creation_date_key, paging), PostSerializer))


class PostDetailView(ServiceView):
    """Handler for DELETE /api/posts/{post_id}"""

    service_class = PostService

    def delete(self, request: Request, post_id) -> Response:
        self.service().delete_post(post_id)
        return Response(status=status.HTTP_204_NO_CONTENT)


class PostCommentsView(ServiceView):
    """Handler for GET|POST /api/posts/{post_id}/comments"""

    service_class = PostService

    def get(self, request: Request, post_id) -> Response:
        paging = self.paging(request)
        comments = self.service().get_comments(post_id)
        return Response(paged_data(Paged.page_from(comments, creation_date_key, paging), CommentSerializer))

    def post(self, request: Request, post_id) -> Response:
        data = _validated(AddCommentSerializer, request.data).validated_data
        comment = self.service().add_comment(post_id, data["content"], data.get("in_response_to_id"))
        return Response(CommentSerializer(comment).data, status=status.HTTP_201_CREATED)


class CommentRepliesView(ServiceView):
    """Handler for GET /api/comments/{comment_id}/replies"""

    service_class = PostService

    def get(self, request: Request, comment_id) -> Response:
        paging = self.paging(request)
        replies = self.service().get_replies(comment_id)
        return Response(paged_data(Paged.page_from(replies, creation_date_key, paging), CommentSerializer))


class PostReactionsView(ServiceView):
    """Handler for GET|PATCH /api/posts/{post_id}/reactions"""

    service_class = PostService

    def get(self, request: Request, post_id) -> Response:
        paging = self.paging(request)
        reactions = self.service().get_reactions(post_id)
        paged = Paged.page_from(reactions, lambda r: str(r.id), paging)
        return Response(paged_data(paged, ReactionSerializer))

    def patch(self, request: Request, post_id) -> Response:
        data = _validated(SetReactionSerializer, request.data).validated_data
        reaction = self.service().set_reaction(post_id, data["type"])
        if reaction is None:
            return Response(status=status.HTTP_204_NO_CONTENT)
        return Response(ReactionSerializer(reaction).data)


class ReportListView(ServiceView):
    """Handler for GET|POST /api/reports"""

    service_class = ReportService

    def get(self, request: Request) -> Response:
        kind = REPORT_KINDS.get(request.query_params.get("type", ""), Report)
        reports = self.service().get_all(kind)
        return Response(ReportSerializer(reports, many=True).data)

    def post(self, request: Request) -> Response:
        data = _validated(CreateReportSerializer, request.data).validated_data
        report = self.service().create_report(**data)
        return Response(ReportSerializer(report).data, status=status.HTTP_201_CREATED)


class ReportDetailView(ServiceView):
    """Handler for GET|PUT|DELETE /api/reports/{report_id}"""

    service_class = ReportService

    def get(self, request: Request, report_id) -> Response:
        return Response(ReportSerializer(self.service().get_by_id(report_id)).data)

    def put(self, request: Request, report_id) -> Response:
        data = _validated(AnswerReportSerializer, request.data).validated_data
        report = self.service().answer_report(report_id, data["feedback"], data["state"])
        return Response(ReportSerializer(report).data)

    def delete(self, request: Request, report_id) -> Response:
        self.service().delete_report(report_id)
        return Response(status=status.HTTP_204_NO_CONTENT)


class UserMeView(ServiceView):
    """Handler for GET /api/users/me"""

    service_class = UserService

    def get(self, request: Request) -> Response:
        return Response(UserSerializer(self.service().get_me()).data)


class UserDetailView(ServiceView):
    """Handler for GET /api/users/{user_id}"""

    service_class = UserService

    def get(self, request: Request, user_id) -> Response:
        return Response(UserSerializer(self.service().get_user(user_id)).data)
