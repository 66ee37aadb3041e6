import random

from luckydraw.db.engine import get_sessionmaker, make_engine
from luckydraw.draw import Participant, default_prizes
from luckydraw.models import Base
from luckydraw.store import SqlActivityStore
from luckydraw.workflows import LotteryController

SAMPLE_NAMES = [
    "Pikachu", "Charmander", "Squirtle", "Bulbasaur", "Eevee",
    "Meowth", "Psyduck", "Snorlax", "Mewtwo", "Mew",
    "Dragonite", "Gyarados", "Gengar", "Lapras", "Ninetales",
    "Charizard", "Blastoise", "Venusaur", "Clefable", "Jigglypuff",
]


def main() -> None:
    """Create a sample activity with one confirmed round in the dev database."""
    engine = make_engine()
    Base.metadata.drop_all(engine)
    Base.metadata.create_all(engine)
    store = SqlActivityStore(get_sessionmaker(engine))

    controller = LotteryController(
        [Participant.create(name) for name in SAMPLE_NAMES],
        default_prizes(),
        store=store,
        rng=random.Random(2025),
    )
    result = controller.save_to_store("Annual Gala Lucky Draw")
    print(f"Activity {result.activity_id}: {result.message}")

    controller.start_lottery()
    winners = controller.complete_spin()
    controller.confirm_winners()
    print("First round winners:", ", ".join(w.name for w in winners))

    result = controller.save_to_store()
    print(f"Saved pool of {len(controller.participants)}: {result.message}")


if __name__ == "__main__":
    main()
