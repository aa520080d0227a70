from .exceptions import StateConflict


class StateMachine:
    """
    Allowed-transitions table for a status field.

    ``transitions`` maps each status to the statuses it may move to. A status
    missing from the map (or mapped to an empty tuple) is terminal.
    """

    def __init__(self, name, transitions):
        self.name = name
        self.transitions = transitions

    @property
    def states(self):
        return tuple(self.transitions)

    def can_transition(self, current, target):
        return target in self.transitions.get(current, ())

    def check(self, current, target):
        if not self.can_transition(current, target):
            raise StateConflict(f"Cannot change {self.name} status from '{current}' to '{target}'")

    def transition(self, instance, target, field='status'):
        """Validate and assign ``target`` on ``instance``; the caller saves."""
        self.check(getattr(instance, field), target)
        setattr(instance, field, target)
        return instance
