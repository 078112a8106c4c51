"""Event admission for the credential secret"""

from credmode.interfaces.capabilities import EventKind, NamespacedName, WatchEvent


class CredentialSecretFilter:
    """Admits only notifications about the one credential secret

    Stateless; safe to call from concurrent deliveries.
    """

    def __init__(self, target: NamespacedName):
        self.target = target

    def _matches(self, event: WatchEvent) -> bool:
        return event.namespace == self.target.namespace and event.name == self.target.name

    def create(self, event: WatchEvent) -> bool:
        return self._matches(event)

    def update(self, event: WatchEvent) -> bool:
        return self._matches(event)

    def delete(self, event: WatchEvent) -> bool:
        return self._matches(event)

    def __call__(self, event: WatchEvent) -> bool:
        handlers = {
            EventKind.CREATE: self.create,
            EventKind.UPDATE: self.update,
            EventKind.DELETE: self.delete,
        }
        return handlers[event.kind](event)
