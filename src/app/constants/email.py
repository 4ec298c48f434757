"""Constantes de protocolo: OAuth JWT bearer, cabeçalhos MIME e labels Gmail."""

from __future__ import annotations

from enum import StrEnum

# OAuth 2.0 JWT bearer grant
OAUTH2_TOKEN_URL = "https://oauth2.googleapis.com/token"
OAUTH2_GRANT_TYPE = "urn:ietf:params:oauth:grant-type:jwt-bearer"
JWT_LIFETIME_SECONDS = 3600

# IAM Credentials
IAM_SERVICE_ACCOUNT_PATH = "projects/-/serviceAccounts/{email}"


class EmailHeader(StrEnum):
    """Cabeçalhos emitidos pelo builder."""

    FROM = "From"
    TO = "To"
    CC = "Cc"
    BCC = "Bcc"
    REPLY_TO = "Reply-To"
    SUBJECT = "Subject"
    MIME_VERSION = "MIME-Version"
    CONTENT_TYPE = "Content-Type"
    TRANSFER_ENCODING = "Content-Transfer-Encoding"
    DISPOSITION = "Content-Disposition"
    READ_RECEIPT = "Disposition-Notification-To"


MIME_VERSION = "1.0"
MIME_MULTIPART_MIXED = "multipart/mixed"
MIME_TEXT_HTML_UTF8 = "text/html; charset=UTF-8"
ENCODING_BASE64 = "base64"
DISPOSITION_ATTACHMENT = "attachment"

# Remetente implícito da Gmail API quando nenhum alias foi injetado
DEFAULT_SENDER = "me"


class GmailLabel(StrEnum):
    """Labels de sistema do Gmail."""

    STARRED = "STARRED"
    IMPORTANT = "IMPORTANT"
