"""Shared constants for stepharness."""

from decimal import Decimal

DEFAULT_SUCCESS_MESSAGE = "Step completed successfully"
STEP_NOT_FOUND_MESSAGE = "step '{step_id}' not found"
STEP_CANCELLED_MESSAGE = "step '{step_id}' cancelled"
STEP_TIMEOUT_MESSAGE = "step '{step_id}' timed out after {timeout}s"

DEFAULT_NUMERIC_TOLERANCE = Decimal("0.001")

# Reserved key used by the bag codec to tag non-JSON values.
TYPE_TAG = "__type__"

DEFAULT_CONFIG_FILE = "stepharness.yaml"
CONFIG_ENV_VAR = "STEPHARNESS_CONFIG"
HISTORY_URL_ENV_VAR = "STEPHARNESS_HISTORY_URL"
