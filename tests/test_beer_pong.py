import random

import pytest

from partydice.game import BeerPongGame
from partydice.game.beer_pong import target_for

PARTY = ["Ann Lee", "Bob Ray", "Cid Poe"]


@pytest.fixture
def teams(announcements):
    game = BeerPongGame(announce=announcements.append, rng=random.Random(3))
    game.sync_roster(PARTY)
    assert game.set_team_mode(True)
    assert game.assign_team("Ann Lee", "Red")
    assert game.assign_team("Cid Poe", "Red")
    assert game.assign_team("Bob Ray", "Blue")
    return game


@pytest.mark.parametrize("drinks,target", [(0, 65), (1, 70), (4, 85), (5, 90), (12, 90)])
def test_target_rises_with_drinks(drinks, target):
    assert target_for(drinks) == target


def test_needs_two_players(announcements):
    game = BeerPongGame(announce=announcements.append)
    game.sync_roster(["Ann Lee"])
    assert not game.start_round()


def test_hit_makes_opponent_drink(beer_pong):
    beer_pong.start_round()
    assert beer_pong.submit_roll("ann lee", 70)

    bob = beer_pong.players["bob ray"]
    assert bob.cups_left == 9
    assert bob.drinks == 1
    assert beer_pong.players["ann lee"].drinks == 0


def test_miss_makes_shooter_drink(beer_pong):
    beer_pong.start_round()
    assert beer_pong.submit_roll("ann lee", 40)

    ann = beer_pong.players["ann lee"]
    assert ann.cups_left == 9
    assert ann.drinks == 1
    assert target_for(ann.drinks) == 70


def test_target_is_checked_against_drinks(beer_pong):
    beer_pong.start_round()
    beer_pong.submit_roll("ann lee", 40)
    beer_pong.submit_roll("ann lee", 67)
    # 67 no longer hits after one drink
    assert beer_pong.players["ann lee"].drinks == 2
    assert beer_pong.players["bob ray"].drinks == 0


def test_duplicate_roll_ignored(beer_pong):
    beer_pong.start_round()
    assert beer_pong.submit_roll("ann lee", 40)
    assert not beer_pong.submit_roll("ann lee", 40)
    assert beer_pong.players["ann lee"].drinks == 1
    assert beer_pong.submit_roll("bob ray", 40)


def test_rolls_ignored_outside_round(beer_pong):
    assert not beer_pong.submit_roll("ann lee", 90)
    assert not beer_pong.submit_roll("zed nobody", 90)


def test_last_player_standing_wins(announcements):
    game = BeerPongGame(announce=announcements.append, solo_cups=2)
    game.sync_roster(PARTY[:2])
    game.start_round()

    game.submit_roll("ann lee", 70)
    assert game.round_active
    game.submit_roll("ann lee", 80)

    assert game.players["bob ray"].is_out
    assert game.round_over
    assert game.winners == ["Ann Lee"]
    assert announcements == ["[Beer Pong] Winner(s): Ann Lee!"]
    assert not game.submit_roll("bob ray", 99)


def test_end_round_after_win_does_not_repeat(announcements):
    game = BeerPongGame(announce=announcements.append, solo_cups=1)
    game.sync_roster(PARTY[:2])
    game.start_round()
    game.submit_roll("bob ray", 20)

    assert game.end_round()
    assert announcements == ["[Beer Pong] Winner(s): Ann Lee!"]
    assert not game.end_round()


def test_start_round_refills_cups(beer_pong):
    beer_pong.start_round()
    beer_pong.submit_roll("ann lee", 40)
    beer_pong.end_round()

    beer_pong.start_round()
    assert beer_pong.players["ann lee"].cups_left == 10
    assert beer_pong.submit_roll("ann lee", 40)


def test_team_pool_sized_by_members(teams):
    assert teams.start_round()
    assert teams.teams["Red"].cups_left == 10
    assert teams.teams["Blue"].cups_left == 5


def test_one_team_cannot_start(announcements):
    game = BeerPongGame(announce=announcements.append)
    game.sync_roster(PARTY)
    game.set_team_mode(True)
    game.assign_team("Ann Lee", "Red")
    game.assign_team("Bob Ray", "Red")
    assert not game.start_round()


def test_team_hit_drains_opposing_pool(teams):
    teams.start_round()
    assert teams.submit_roll("bob ray", 90)

    red = teams.teams["Red"]
    assert red.cups_left == 9
    drinks = teams.players["ann lee"].drinks + teams.players["cid poe"].drinks
    assert drinks == 1


def test_team_miss_costs_own_pool(teams):
    teams.start_round()
    assert teams.submit_roll("bob ray", 10)
    assert teams.teams["Blue"].cups_left == 4
    assert teams.players["bob ray"].drinks == 1


def test_shooter_without_team_ignored(teams):
    teams.sync_roster(PARTY + ["Dan Roe"])
    teams.start_round()
    assert not teams.submit_roll("dan roe", 90)


def test_team_knocked_out(announcements):
    game = BeerPongGame(announce=announcements.append, rng=random.Random(1), team_cups=1)
    game.sync_roster(PARTY)
    game.set_team_mode(True)
    game.assign_team("Ann Lee", "Red")
    game.assign_team("Cid Poe", "Red")
    game.assign_team("Bob Ray", "Blue")
    game.start_round()

    game.submit_roll("ann lee", 95)
    assert game.teams["Blue"].is_out
    assert game.winners == ["Red"]
    assert announcements == ["[Beer Pong] Winner(s): Red!"]


def test_leaving_party_drops_team_membership(teams):
    teams.sync_roster(["Ann Lee", "Cid Poe"])
    assert "Blue" not in teams.teams
    assert teams.teams["Red"].members == ["ann lee", "cid poe"]


def test_assign_team_rules(teams, beer_pong):
    assert not beer_pong.assign_team("Ann Lee", "Red")
    assert not teams.assign_team("Ann Lee", " ")
    assert not teams.assign_team("Zed Nobody", "Red")

    assert teams.assign_team("Cid Poe", "Blue")
    assert teams.teams["Blue"].members == ["bob ray", "cid poe"]


def test_clear_teams(teams):
    assert teams.clear_teams()
    assert teams.teams == {}
    assert all(p.team is None for p in teams.players.values())


def test_snapshot_reports_targets(beer_pong):
    beer_pong.start_round()
    beer_pong.submit_roll("ann lee", 40)
    snap = beer_pong.snapshot()
    targets = {p.key: p.target for p in snap.players}
    assert targets == {"ann lee": 70, "bob ray": 65}


def test_opponent_leaving_decides_the_round(beer_pong, announcements):
    beer_pong.start_round()
    beer_pong.sync_roster(["Ann Lee"])
    assert beer_pong.round_over
    assert beer_pong.winners == ["Ann Lee"]
    assert announcements == ["[Beer Pong] Winner(s): Ann Lee!"]


def test_leaver_takes_their_cups_from_the_pool(teams):
    teams.start_round()
    teams.submit_roll("cid poe", 10)
    assert teams.teams["Red"].cups_left == 9

    teams.sync_roster(["Ann Lee", "Bob Ray"])
    assert teams.teams["Red"].cups_left == 5
    assert teams.round_active


def test_last_team_standing_after_departures(teams, announcements):
    teams.start_round()
    teams.sync_roster(["Ann Lee", "Cid Poe"])
    assert teams.round_over
    assert teams.winners == ["Red"]
    assert announcements == ["[Beer Pong] Winner(s): Red!"]
