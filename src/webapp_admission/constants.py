"""
Constants used throughout the webapp admission webhook.

This module defines all constant values used by the webhook including:
- API coordinates of the Deployment custom resource
- Webhook registration names and paths
- Validation thresholds
- Kubernetes field error types and status reasons
"""

# Deployment custom resource coordinates
API_GROUP = "webapp.my.domain"
API_VERSION = "v1"
API_PLURAL = "deployments"
RESOURCE_KIND = "Deployment"

# Group reported in Invalid errors (matches the group used by the original API types)
ERROR_GROUP = "webapp"

# Webhook registration
# Kopf serves each admission handler on "/{handler id}", so the id doubles as the path
WEBHOOK_HANDLER_ID = "validate-webapp-my-domain-v1-deployment"
WEBHOOK_PATH = f"/{WEBHOOK_HANDLER_ID}"
WEBHOOK_NAME = "vdeployment.kb.io"
WEBHOOK_CONFIGURATION_NAME = "webapp-validating-webhook-configuration"
WEBHOOK_OPERATIONS = ["CREATE", "UPDATE"]
WEBHOOK_ADMISSION_REVIEW_VERSIONS = ["v1"]
WEBHOOK_FAILURE_POLICY = "Fail"
WEBHOOK_SIDE_EFFECTS = "None"
WEBHOOK_TIMEOUT_SECONDS = 10

# Admission operations as sent in AdmissionReview requests
OPERATION_CREATE = "CREATE"
OPERATION_UPDATE = "UPDATE"
OPERATION_DELETE = "DELETE"
OPERATION_CONNECT = "CONNECT"

# Validation thresholds
# Fewer than three replicas cannot tolerate the loss of a node
MIN_REPLICAS = 3

# Kubernetes field error types (k8s.io/apimachinery/pkg/util/validation/field)
FIELD_VALUE_INVALID = "FieldValueInvalid"
FIELD_VALUE_REQUIRED = "FieldValueRequired"
FIELD_VALUE_TYPE_INVALID = "FieldValueTypeInvalid"

# Human readable prefixes used when rendering field errors
FIELD_ERROR_DETAILS = {
    FIELD_VALUE_INVALID: "Invalid value",
    FIELD_VALUE_REQUIRED: "Required value",
    FIELD_VALUE_TYPE_INVALID: "Invalid value",
}

# Status returned for rejected objects (HTTP 422 Unprocessable Entity)
STATUS_REASON_INVALID = "Invalid"
STATUS_CODE_INVALID = 422

# Structured logging
RESOURCE_TYPE = "deployment"
