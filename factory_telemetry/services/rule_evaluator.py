from typing import Optional

from factory_telemetry.core.alert_rule_config import AlertRuleConfig


def calibrate(value: float, scale: Optional[float] = None, offset: Optional[float] = None) -> float:
    """
    Convert a raw sensor value into the unit rules are expressed in.

    Args:
        value: raw reading
        scale: multiplicative factor, 1 when missing
        offset: additive factor, 0 when missing

    Returns:
        value * scale + offset
    """
    if scale is None:
        scale = AlertRuleConfig.DEFAULT_SCALE
    if offset is None:
        offset = AlertRuleConfig.DEFAULT_OFFSET
    return float(value) * float(scale) + float(offset)


def check_range(adjusted, min_value, max_value):
    # bounds belong to the safe range
    if min_value is not None and adjusted < min_value:
        return True
    if max_value is not None and adjusted > max_value:
        return True
    return False


def is_violated(rule, adjusted: float) -> bool:
    """
    Evaluate one rule against a calibrated value.

    `rule` only needs operator, min_value, max_value and threshold_value attributes,
    so ORM rows and plain records both work.
    """
    operator = rule.operator
    if operator == AlertRuleConfig.OPERATOR_RANGE:
        return check_range(adjusted, rule.min_value, rule.max_value)

    threshold = rule.threshold_value
    if threshold is None:
        return False
    if operator == AlertRuleConfig.OPERATOR_GT:
        return adjusted > threshold
    if operator == AlertRuleConfig.OPERATOR_LT:
        return adjusted < threshold
    if operator == AlertRuleConfig.OPERATOR_EQ:
        # exact comparison, no tolerance is defined for calibrated floats
        return adjusted == threshold
    return False
