from carrental.extensions import db
from carrental.models import Notification
from carrental.stores import NotificationStore


class NotificationService:
    @staticmethod
    def push(user_id, title, message):
        notification = Notification(user_id=user_id, title=title, message=message, type="in_app", is_read=False)
        return NotificationStore.insert(notification)

    @staticmethod
    def unread_count(user_id):
        return NotificationStore.unread_count(user_id)

    @staticmethod
    def latest_for_user(user_id, limit=10):
        return NotificationStore.latest_for_user(user_id, limit=limit)

    @staticmethod
    def mark_all_read(user_id):
        updated = NotificationStore.mark_all_read(user_id)
        db.session.commit()
        return updated

    @staticmethod
    def serialize(notification):
        return {
            "id": notification.id,
            "title": notification.title,
            "message": notification.message,
            "is_read": notification.is_read,
            "created_at": notification.created_at.isoformat(),
        }
