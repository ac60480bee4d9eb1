from dataclasses import dataclass

EMPTY_MINUTE = -1


@dataclass(frozen=True)
class CurrentSlot:
    time_label: str = ""
    text: str = ""
    timestamp: int = 0
    minute_of_hour: int = EMPTY_MINUTE

    @property
    def is_empty(self) -> bool:
        return not self.text


@dataclass(frozen=True)
class NextSlot:
    text: str = ""
    minute_of_hour: int = EMPTY_MINUTE
    time_label: str = ""
    timestamp: int = 0

    @property
    def is_empty(self) -> bool:
        return self.minute_of_hour == EMPTY_MINUTE


class PoemCache:
    """The poem being served now and the one prefetched for the next minute.

    Slots are immutable and replaced wholesale, so a reader always gets a
    consistent snapshot. Only the scheduler assigns them.
    """

    def __init__(self):
        self.current = CurrentSlot()
        self.next = NextSlot()
