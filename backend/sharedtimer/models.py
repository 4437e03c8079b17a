from dataclasses import dataclass
from typing import Callable, Container, Optional
import random
import uuid

ADJECTIVES = [
    'happy', 'silly', 'crazy', 'lazy', 'fuzzy', 'dizzy', 'bouncy', 'sleepy',
    'grumpy', 'snazzy', 'wacky', 'quirky', 'jolly', 'cheeky', 'funky', 'goofy',
    'loopy', 'zippy', 'perky', 'sassy', 'clumsy', 'sparkly', 'wobbly', 'giggly',
    'sneaky', 'dreamy', 'fluffy', 'bumpy', 'jumpy', 'lumpy', 'spicy', 'crispy',
    'rainy', 'sunny', 'cloudy', 'breezy', 'foggy', 'snowy', 'windy', 'stormy',
    'mighty', 'tiny', 'giant', 'swift', 'brave', 'bold', 'wild', 'calm',
]

NOUNS = [
    'cloud', 'kitchen', 'pancake', 'waffle', 'muffin', 'cookie', 'pickle', 'noodle',
    'potato', 'banana', 'taco', 'burrito', 'pizza', 'donut', 'cupcake', 'sandwich',
    'penguin', 'koala', 'llama', 'panda', 'hamster', 'bunny', 'turtle', 'dolphin',
    'octopus', 'narwhal', 'unicorn', 'dragon', 'phoenix', 'wizard', 'ninja', 'pirate',
    'rocket', 'comet', 'planet', 'galaxy', 'meteor', 'rainbow', 'thunder', 'lightning',
    'mountain', 'river', 'ocean', 'forest', 'desert', 'valley', 'volcano', 'island',
    'robot', 'spaceship', 'castle', 'treasure', 'crystal', 'diamond', 'star', 'moon',
]


@dataclass
class TimerRecord:
    id: str
    duration: int = 0
    remaining_time: int = 0
    end_time: Optional[int] = None
    running: bool = False
    last_activity: int = 0
    connected_users: int = 0

    def touch(self, now: int) -> None:
        self.last_activity = now


def generate_readable_id(taken: Container[str], rng=random) -> str:
    """Generate a memorable id like ``happy-cloud-42``.

    The number is rerolled while the id collides with one in ``taken``;
    the words are only re-picked after a full round of misses.
    """
    while True:
        adjective = rng.choice(ADJECTIVES)
        noun = rng.choice(NOUNS)
        for _ in range(1000):
            timer_id = f"{adjective}-{noun}-{rng.randrange(1000)}"
            if timer_id not in taken:
                return timer_id


def generate_uuid_id(taken: Container[str]) -> str:
    while True:
        timer_id = uuid.uuid4().hex
        if timer_id not in taken:
            return timer_id


ID_GENERATORS: dict[str, Callable[[Container[str]], str]] = {
    'readable': generate_readable_id,
    'uuid': generate_uuid_id,
}
