"""OS command type names."""

OS_FOCUS = "OS_FOCUS"
OS_SYNC_FOCUS = "OS_SYNC_FOCUS"
OS_RECOVER = "OS_RECOVER"

OS_NAVIGATE = "OS_NAVIGATE"
OS_TAB = "OS_TAB"
OS_TYPEAHEAD = "OS_TYPEAHEAD"

OS_SELECT = "OS_SELECT"
OS_SELECT_ALL = "OS_SELECT_ALL"
OS_DESELECT_ALL = "OS_DESELECT_ALL"
SELECTION_SET = "OS_SELECTION_SET"
SELECTION_ADD = "OS_SELECTION_ADD"
SELECTION_REMOVE = "OS_SELECTION_REMOVE"
SELECTION_TOGGLE = "OS_SELECTION_TOGGLE"
SELECTION_CLEAR = "OS_SELECTION_CLEAR"

OS_ACTIVATE = "OS_ACTIVATE"
OS_CHECK = "OS_CHECK"
OS_ESCAPE = "OS_ESCAPE"
OS_EXPAND = "OS_EXPAND"
OS_VALUE_CHANGE = "OS_VALUE_CHANGE"
OS_DELETE = "OS_DELETE"
OS_COPY = "OS_COPY"
OS_CUT = "OS_CUT"
OS_PASTE = "OS_PASTE"
OS_MOVE_UP = "OS_MOVE_UP"
OS_MOVE_DOWN = "OS_MOVE_DOWN"
OS_UNDO = "OS_UNDO"
OS_REDO = "OS_REDO"
OS_DRAG_END = "OS_DRAG_END"

OS_FIELD_START_EDIT = "OS_FIELD_START_EDIT"
OS_FIELD_COMMIT = "OS_FIELD_COMMIT"
OS_FIELD_CANCEL = "OS_FIELD_CANCEL"

# Commands that only touch focus/selection/OS state, never app data
OS_PASSTHROUGH = frozenset({
    OS_FOCUS,
    OS_SYNC_FOCUS,
    OS_RECOVER,
    OS_NAVIGATE,
    OS_TAB,
    OS_TYPEAHEAD,
    OS_SELECT,
    OS_SELECT_ALL,
    OS_DESELECT_ALL,
    SELECTION_SET,
    SELECTION_ADD,
    SELECTION_REMOVE,
    SELECTION_TOGGLE,
    SELECTION_CLEAR,
    OS_ACTIVATE,
    OS_CHECK,
    OS_ESCAPE,
    OS_EXPAND,
    OS_VALUE_CHANGE,
    OS_DELETE,
    OS_COPY,
    OS_CUT,
    OS_PASTE,
    OS_MOVE_UP,
    OS_MOVE_DOWN,
    OS_UNDO,
    OS_REDO,
    OS_DRAG_END,
    OS_FIELD_START_EDIT,
    OS_FIELD_COMMIT,
    OS_FIELD_CANCEL,
})

# History handles these itself
SELF_MANAGED = frozenset({"UNDO", "REDO", "undo", "redo"})
