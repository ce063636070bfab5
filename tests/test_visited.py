from threading import Barrier, Thread

from crawler.visited import VisitedSet


def test_first_claim_wins():
    visited = VisitedSet()
    assert visited.try_claim("https://a.test/")
    assert not visited.try_claim("https://a.test/")
    assert "https://a.test/" in visited
    assert len(visited) == 1


def test_racing_claims_yield_exactly_one_winner():
    visited = VisitedSet()
    racers = 16
    barrier = Barrier(racers)
    results = []

    def claim():
        barrier.wait()
        results.append(visited.try_claim("https://a.test/same"))

    threads = [Thread(target=claim) for _ in range(racers)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert results.count(True) == 1
    assert results.count(False) == racers - 1
