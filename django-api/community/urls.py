from django.urls import path

from community.handlers import (
    CommentRepliesView,
    EventDetailView,
    EventFeedbackView,
    EventInterestedView,
    EventListView,
    EventParticipantsView,
    EventPostsView,
    PostCommentsView,
    PostDetailView,
    PostListView,
    PostReactionsView,
    ReportDetailView,
    ReportListView,
    UserDetailView,
    UserMeView,
    UserPostsView,
)

urlpatterns = [
    path("events", EventListView.as_view(), name="event-list"),
    path("events/<uuid:event_id>", EventDetailView.as_view(), name="event-detail"),
    path(
        "events/<uuid:event_id>/participants",
        EventParticipantsView.as_view(),
        name="event-participants",
    ),
    path(
        "events/<uuid:event_id>/interested",
        EventInterestedView.as_view(),
        name="event-interested",
    ),
    path("events/<uuid:event_id>/posts", EventPostsView.as_view(), name="event-posts"),
    path("events/<uuid:event_id>/feedback", EventFeedbackView.as_view(), name="event-feedback"),
    path("posts", PostListView.as_view(), name="post-list"),
    path("posts/user", UserPostsView.as_view(), name="post-user"),
    path("posts/<uuid:post_id>", PostDetailView.as_view(), name="post-detail"),
    path("posts/<uuid:post_id>/comments", PostCommentsView.as_view(), name="post-comments"),
    path("posts/<uuid:post_id>/reactions", PostReactionsView.as_view(), name="post-reactions"),
    path(
        "comments/<uuid:comment_id>/replies",
        CommentRepliesView.as_view(),
        name="comment-replies",
    ),
    path("reports", ReportListView.as_view(), name="report-list"),
    path("reports/<uuid:report_id>", ReportDetailView.as_view(), name="report-detail"),
    path("users/me", UserMeView.as_view(), name="user-me"),
    path("users/<uuid:user_id>", UserDetailView.as_view(), name="user-detail"),
]
