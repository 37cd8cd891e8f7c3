"""StudySync client toolkit: API client, quiz attempts and subscription gating."""

__version__ = "0.1.0"
