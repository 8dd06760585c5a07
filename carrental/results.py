from dataclasses import dataclass
from functools import wraps
from typing import Any, Optional

from flask import current_app, jsonify
from sqlalchemy.exc import SQLAlchemyError

from carrental.errors import AppError, InfrastructureError
from carrental.extensions import db


@dataclass
class ServiceResult:
    success: bool
    message: str = ""
    data: Any = None
    error: Optional[AppError] = None

    @classmethod
    def ok(cls, data=None, message=""):
        return cls(success=True, message=message, data=data)

    @classmethod
    def failure(cls, error):
        return cls(success=False, message=error.message, error=error)

    @property
    def status_code(self):
        if self.error is not None:
            return self.error.status_code
        return 200

    def to_response(self, success_status=200, failure_status=400, serializer=None):
        payload = {"success": self.success, "message": self.message}
        if self.data is not None:
            payload["data"] = serializer(self.data) if serializer else self.data
        if self.success:
            return jsonify(payload), success_status
        return jsonify(payload), self.error.status_code if self.error is not None else failure_status


def service_operation(func):
    """Turn business errors into failed results and storage faults into InfrastructureError.

    Either way the session is rolled back, so nothing from a failed operation
    is ever committed.
    """

    @wraps(func)
    def inner(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except InfrastructureError:
            db.session.rollback()
            raise
        except AppError as err:
            db.session.rollback()
            return ServiceResult.failure(err)
        except SQLAlchemyError as exc:
            db.session.rollback()
            current_app.logger.exception("%s rolled back after a storage error", func.__qualname__)
            raise InfrastructureError("The booking store is unavailable. Please try again.") from exc

    return inner
