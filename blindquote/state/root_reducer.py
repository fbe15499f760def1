"""
Root reducer: routes an action to the sub-reducer for its namespace.

Returns the same state object when the sub-reducer reports no change.
"""

from . import actions as a
from .quote_reducer import QuoteDeps, quote_reducer
from .ui_reducer import ui_reducer


def create_root_reducer(deps: QuoteDeps):

    def root_reducer(state: dict, action: a.Action) -> dict:
        if action.namespace == "ui":
            new_ui = ui_reducer(state["ui"], action)
            if new_ui is not state["ui"]:
                return {**state, "ui": new_ui}
        elif action.namespace == "quote":
            new_quote_data = quote_reducer(state["quote_data"], action, deps)
            if new_quote_data is not state["quote_data"]:
                return {**state, "quote_data": new_quote_data}
        return state

    return root_reducer
