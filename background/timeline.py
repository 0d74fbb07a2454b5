"""
Timeline Module - Owned tween timeline driven by frame timestamps

Each background controller owns one Timeline. Tweens start on the first
tick after they are added and are killed together when the controller
unmounts, so no tween outlives the scene it animates.
"""

EASES = {
    'none': lambda t: t,
    'power2.in': lambda t: t * t,
    'power2.out': lambda t: 1.0 - (1.0 - t) ** 2,
    'power2.inOut': lambda t: 2.0 * t * t if t < 0.5 else 1.0 - (-2.0 * t + 2.0) ** 2 / 2.0,
}


class Tween:
    def __init__(self, target, attribute, start, end, duration, ease='none'):
        if ease not in EASES:
            raise ValueError(f"Unknown ease: {ease}")
        if duration < 0:
            raise ValueError("duration must not be negative")
        self.target = target
        self.attribute = attribute
        self.start = start
        self.end = end
        self.duration = duration
        self.ease = ease
        self.started_at = None
        self.finished = False
        self.killed = False

    def render(self, now):
        """Apply the tween at ``now`` (milliseconds); returns True once done."""
        if self.killed or self.finished:
            return True
        if self.started_at is None:
            self.started_at = now
        elapsed = (now - self.started_at) / 1000.0
        progress = 1.0 if self.duration == 0 else min(max(elapsed / self.duration, 0.0), 1.0)
        eased = EASES[self.ease](progress)
        setattr(self.target, self.attribute, self.start + (self.end - self.start) * eased)
        self.finished = progress >= 1.0
        return self.finished

    def kill(self):
        self.killed = True


class Timeline:
    def __init__(self):
        self.tweens = []

    @property
    def active(self):
        return bool(self.tweens)

    def from_to(self, target, attribute, start, end, duration, ease='none'):
        """Set ``attribute`` to ``start`` now and tween it to ``end``."""
        tween = Tween(target, attribute, start, end, duration, ease)
        setattr(target, attribute, start)
        self.tweens.append(tween)
        return tween

    def tick(self, now):
        self.tweens = [tween for tween in self.tweens if not tween.render(now)]

    def kill(self):
        for tween in self.tweens:
            tween.kill()
        self.tweens = []


__all__ = ['Timeline', 'Tween', 'EASES']
