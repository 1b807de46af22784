from community.handlers.views import (
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

__all__ = [
    "EventListView",
    "EventDetailView",
    "EventParticipantsView",
    "EventInterestedView",
    "EventPostsView",
    "EventFeedbackView",
    "PostListView",
    "UserPostsView",
    "PostDetailView",
    "PostCommentsView",
    "PostReactionsView",
    "CommentRepliesView",
    "ReportListView",
    "ReportDetailView",
    "UserMeView",
    "UserDetailView",
]
