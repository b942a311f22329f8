from enum import Enum


class MessageType(str, Enum):
    EMAIL = "email"
    SMS = "sms"


class MessageStatus(str, Enum):
    CREATED = "created"
    PENDING = "pending"
    SENDING = "sending"
    SENT = "sent"
    SUCCESS = "success"
    FAILURE = "failure"


class OrganizationStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"


class AccountRole(str, Enum):
    GLOBAL_ADMIN = "global-admin"
    MANAGEMENT = "management"
    MESSAGING = "messaging"
    MESSAGING_TEST = "messaging-test"


class AccountType(str, Enum):
    USER = "user"
    CLIENT = "client"


class AccountStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"


class TemplateStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"


class TemplateStage(str, Enum):
    PUBLISHED = "published"
    DRAFT = "draft"


class SenderStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"


class ServiceProvider(str, Enum):
    TWILIO = "twilio"
    SENDGRID = "sendgrid"
    AWS_SES = "aws-ses"
    EMAIL_INTEGRATION_TEST = "email-integration-test"
    SMS_INTEGRATION_TEST = "sms-integration-test"


class BlockReasonType(str, Enum):
    SPAM = "spam"
    BOUNCE = "bounce"
    BLOCKED = "blocked"
    OPT_OUT = "optout"
    OTHER = "other"
    MANUAL = "manual"
