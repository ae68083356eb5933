"""
Visibility rules for the battery percentage label.
"""

from batterylabel.state.battery import BatteryState, BatteryStyle, PercentMode, Visibility


def compute_visible(state: BatteryState) -> bool:
    """Decide whether the percentage label should be shown.

    First match wins:
    1. GONE style hides the label.
    2. TEXT style always shows it, whatever the percent mode.
    3. Percent mode OFF hides it.
    4. OUTSIDE shows it.
    5. INSIDE shows it only while charging.
    6. Anything else hides it.

    force_show turns every hidden outcome into a shown one.
    """
    if state.style == BatteryStyle.GONE:
        show = False
    elif state.style == BatteryStyle.TEXT:
        show = True
    elif state.percent_mode == PercentMode.OFF:
        show = False
    elif state.percent_mode == PercentMode.OUTSIDE:
        show = True
    elif state.percent_mode == PercentMode.INSIDE and state.is_charging:
        show = True
    else:
        show = False
    return show or state.force_show


def resolve_visibility(state: BatteryState) -> Visibility:
    """Visibility to render: the requested one when shown, GONE otherwise."""
    if compute_visible(state):
        return state.requested_visibility
    return Visibility.GONE
