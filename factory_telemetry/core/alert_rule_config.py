# Vocabulary and defaults for sensor rules, alerts and vision events.
# Values mirror what the operations UI sends and stores.

class AlertRuleConfig:
    # Rule comparison operators
    OPERATOR_RANGE = "range"
    OPERATOR_GT = "gt"
    OPERATOR_LT = "lt"
    OPERATOR_EQ = "eq"
    OPERATORS = (OPERATOR_RANGE, OPERATOR_GT, OPERATOR_LT, OPERATOR_EQ)

    # Operators that compare against threshold_value
    THRESHOLD_OPERATORS = (OPERATOR_GT, OPERATOR_LT, OPERATOR_EQ)

    PRIORITIES = ("low", "medium", "high", "critical")
    DEFAULT_PRIORITY = "medium"
    DEFAULT_MESSAGE = "Sensor alert"

    # Calibration defaults applied when a binding omits them
    DEFAULT_SCALE = 1.0
    DEFAULT_OFFSET = 0.0

    # Alert lifecycle
    ALERT_ACTIVE = "active"
    ALERT_ACKNOWLEDGED = "acknowledged"
    ALERT_STATUSES = (ALERT_ACTIVE, ALERT_ACKNOWLEDGED)


class VisionConfig:
    STATUS_ACTIVE = "active"
    STATUS_INACTIVE = "inactive"

    SCOPE_ROI = "roi"
    SCOPE_MACHINE = "machine"
    SCOPE_CAMERA = "camera"


class IdPrefix:
    SENSOR = "sensor"
    BINDING = "bind"
    RULE = "rule"
    ALERT = "alert"
    VISION_EVENT = "vis"
