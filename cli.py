import argparse
import logging

from cards import CardType, load_catalog
from sim.civilization import Civilization
from sim.history import StatHistory


def _card_type(value: str) -> CardType:
    try:
        return CardType[value.upper()]
    except KeyError:
        raise argparse.ArgumentTypeError(
            f"unknown card type {value!r} (choose from "
            f"{', '.join(t.name.lower() for t in CardType)})"
        )


def cmd_cards(args):
    catalog = load_catalog(args.catalog)
    cards = catalog.by_type(args.type) if args.type else list(catalog)
    for card in cards:
        mods = ", ".join(f"{m.target.value} {m.delta:+d}" for m in card.modifiers) or "no effect"
        print(f"{card.id:<20} {card.type.value:<14} {card.name}: {mods}")


def cmd_play(args):
    catalog = load_catalog(args.catalog)
    try:
        played = [catalog.get(card_id) for card_id in args.cards]
    except KeyError as e:
        args.parser.error(e.args[0])

    civ = Civilization(args.id, args.name, args.personality,
                       survival=args.survival, faith=args.faith)
    history = StatHistory()
    history.attach(civ)
    print(civ.summary())
    for card in played:
        civ.apply_card(card)
        print(f"  {card.name:<20} -> {civ.summary()}")
    history.detach(civ)

    idx = history.extinction_index()
    if idx is not None:
        print(f"Extinct after step {idx} of {len(history) - 1}.")
    for stat, s in history.summary().items():
        print(f"{stat:<9} min={s['min']:.0f} max={s['max']:.0f} mean={s['mean']:.1f}")


def main(argv=None):
    ap = argparse.ArgumentParser(description="Apply cards to a civilization")
    ap.add_argument("-v", "--verbose", action="store_true", help="Log every modifier")
    ap.add_argument("--catalog", default=None,
                    help="Card JSON file (default: balance/cards.json or built-in cards)")
    sub = ap.add_subparsers()

    ap_cards = sub.add_parser("cards", help="List the card catalog")
    ap_cards.add_argument("--type", type=_card_type, default=None,
                          help="player_power or faction_action")
    ap_cards.set_defaults(func=cmd_cards)

    ap_play = sub.add_parser("play", help="Apply cards in order to a new civilization")
    ap_play.add_argument("cards", nargs="+", help="Card ids, applied left to right")
    ap_play.add_argument("--id", default="civ0")
    ap_play.add_argument("--name", default="Civilization")
    ap_play.add_argument("--personality", default="")
    ap_play.add_argument("--survival", type=int, default=None)
    ap_play.add_argument("--faith", type=int, default=None)
    ap_play.set_defaults(func=cmd_play, parser=ap_play)

    args = ap.parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO,
                        format="%(levelname)s %(name)s: %(message)s")
    if hasattr(args, "func"):
        args.func(args)
    else:
        ap.print_help()


if __name__ == "__main__":
    main()
