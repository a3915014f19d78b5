from .notifier import HttpWebhookNotifier, LogNotifier, Notifier, create_notifier
from .sinks import CsvEventSink, HazardEventSinks, JsonlEventSink, event_to_dict

__all__ = [
    "CsvEventSink",
    "HazardEventSinks",
    "HttpWebhookNotifier",
    "JsonlEventSink",
    "LogNotifier",
    "Notifier",
    "create_notifier",
    "event_to_dict",
]
