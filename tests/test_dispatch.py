import pytest

from partydice.game import (
    beer_pong_dispatcher,
    blackjack_dispatcher,
    darts_dispatcher,
    deathroll_dispatcher,
)
from partydice.models import ChannelKind, ChatLine


def line(sender, message, channel=ChannelKind.PARTY):
    return ChatLine(channel=channel, sender=sender, message=message)


def test_blackjack_roll_reaches_game(blackjack):
    dispatcher = blackjack_dispatcher(blackjack)
    blackjack.start_round()

    assert dispatcher.handle(line("★Ann LeeSiren", "Random! (1-11) 8"))
    assert blackjack.hands["ann lee"].hands == [[8]]


def test_blackjack_only_listens_to_party(blackjack):
    dispatcher = blackjack_dispatcher(blackjack)
    blackjack.start_round()

    assert not dispatcher.handle(line("Ann Lee", "Random! (1-11) 8", ChannelKind.SAY))
    assert "ann lee" not in blackjack.hands


def test_blackjack_ignores_other_dice(blackjack):
    dispatcher = blackjack_dispatcher(blackjack)
    blackjack.start_round()

    assert not dispatcher.handle(line("Ann Lee", "Random! (1-100) 8"))
    assert not dispatcher.handle(line("Ann Lee", "Random! 8"))


def test_rolls_ignored_while_idle(blackjack):
    dispatcher = blackjack_dispatcher(blackjack)
    assert not dispatcher.handle(line("Ann Lee", "Random! (1-11) 8"))


@pytest.mark.parametrize("sender", ["", "   ", "★"])
def test_blank_sender_ignored(blackjack, sender):
    dispatcher = blackjack_dispatcher(blackjack)
    blackjack.start_round()
    assert not dispatcher.handle(line(sender, "Random! (1-11) 8"))


def test_stand_command(blackjack):
    dispatcher = blackjack_dispatcher(blackjack)
    blackjack.start_round()

    assert dispatcher.handle(line("Ann Lee", "Random! (1-11) 9"))
    assert dispatcher.handle(line("Ann Lee", "  Stand "))
    assert blackjack.current_key == "bob ray"


def test_stand_from_wrong_player(blackjack):
    dispatcher = blackjack_dispatcher(blackjack)
    blackjack.start_round()
    assert not dispatcher.handle(line("Bob Ray", "stand"))


def test_split_command(blackjack):
    dispatcher = blackjack_dispatcher(blackjack)
    blackjack.start_round()
    dispatcher.handle(line("Ann Lee", "Random! (1-11) 4"))
    dispatcher.handle(line("Ann Lee", "Random! (1-11) 4"))

    assert dispatcher.handle(line("Ann Lee", "split"))
    assert blackjack.hands["ann lee"].hands == [[4], [4]]


@pytest.mark.parametrize("channel", [ChannelKind.PARTY, ChannelKind.SAY, ChannelKind.YELL])
def test_darts_listens_to_open_channels(darts, channel):
    dispatcher = darts_dispatcher(darts)
    darts.start_round()
    assert dispatcher.handle(line("Ann Lee", "Random! 45", channel))
    assert darts.current_throws == [45]


def test_darts_ignores_tells(darts):
    dispatcher = darts_dispatcher(darts)
    darts.start_round()
    assert not dispatcher.handle(line("Ann Lee", "Random! 45", ChannelKind.TELL))


def test_darts_rejects_values_above_sixty(darts):
    dispatcher = darts_dispatcher(darts)
    darts.start_round()
    assert not dispatcher.handle(line("Ann Lee", "Random! (1-100) 70"))
    assert dispatcher.handle(line("Ann Lee", "Random! (1-60) 60"))
    assert darts.current_throws == [60]


def test_beer_pong_wants_hundred_sided_rolls(beer_pong):
    dispatcher = beer_pong_dispatcher(beer_pong)
    beer_pong.start_round()

    assert not dispatcher.handle(line("Ann Lee", "Random! 70"))
    assert dispatcher.handle(line("Ann Lee", "Random! (1-100) 70"))
    assert beer_pong.players["bob ray"].drinks == 1


def test_deathroll_range_follows_ceiling(deathroll):
    dispatcher = deathroll_dispatcher(deathroll)
    deathroll.start_round()

    assert dispatcher.handle(line("Ann Lee", "Random! (1-1000) 550"))
    assert not dispatcher.handle(line("Bob Ray", "Random! (1-1000) 600"))
    assert dispatcher.handle(line("Bob Ray", "Random! 120"))
    assert deathroll.current_max == 120
