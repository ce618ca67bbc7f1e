from dataclasses import dataclass


@dataclass(frozen=True)
class Judgment:
    """Target text split for highlighting.

    correct: target prefix matched by the committed input
    wrong: target characters under mismatched input, bounded by the shorter string
    pending: target characters not yet reached
    mismatch_index: first diverging index, None when the input is a clean prefix
    """

    correct: str
    wrong: str
    pending: str
    mismatch_index: int | None = None

    @property
    def judged(self) -> bool:
        return bool(self.correct or self.wrong)


def unjudged(target: str) -> Judgment:
    return Judgment(correct="", wrong="", pending=target)


def find_mismatch(target: str, value: str) -> int | None:
    """First index where value diverges from target.

    A value longer than the target that starts with the whole target diverges
    at len(target). A value that is a prefix of the target does not diverge.
    """
    common = min(len(value), len(target))
    for i in range(common):
        if value[i] != target[i]:
            return i
    if len(value) > len(target):
        return len(target)
    return None


def judge(target: str, value: str) -> Judgment:
    """Split target into correct / wrong / pending spans for a committed value."""
    mismatch = find_mismatch(target, value)
    bound = min(len(value), len(target))
    if mismatch is None:
        return Judgment(correct=target[:bound], wrong="", pending=target[bound:])
    return Judgment(
        correct=target[:mismatch],
        wrong=target[mismatch:bound],
        pending=target[bound:],
        mismatch_index=mismatch,
    )
