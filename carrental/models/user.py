from flask_login import UserMixin

from carrental.extensions import db
from carrental.models.base import PKType, TimestampMixin

ROLE_CUSTOMER = "customer"
ROLE_DRIVER = "driver"
ROLE_ADMIN = "admin"
ROLE_SUPERADMIN = "superadmin"

USER_ROLES = {ROLE_CUSTOMER, ROLE_DRIVER, ROLE_ADMIN, ROLE_SUPERADMIN}
ADMIN_ROLES = {ROLE_ADMIN, ROLE_SUPERADMIN}


class User(UserMixin, TimestampMixin, db.Model):
    __tablename__ = "users"

    id = db.Column(PKType, primary_key=True, autoincrement=True)
    # Subject claim issued by the external identity provider.
    external_subject = db.Column(db.String(255), nullable=False, unique=True, index=True)
    full_name = db.Column(db.String(120), nullable=False)
    email = db.Column(db.String(255), nullable=False, unique=True, index=True)
    phone = db.Column(db.String(20), nullable=False, default="")
    role = db.Column(db.String(24), nullable=False, index=True, default=ROLE_CUSTOMER)
    is_active_user = db.Column(db.Boolean, nullable=False, default=True)

    __table_args__ = (
        db.CheckConstraint(
            "role IN ({})".format(", ".join(f"'{role}'" for role in sorted(USER_ROLES))),
            name="ck_user_role",
        ),
    )

    @property
    def is_admin(self):
        return self.role in ADMIN_ROLES
