"""Story builders and an in-memory record store for tests."""

from datespots.models.story import DateStory


def make_story(id_="1", rating="4", type_of_date="walk and talk", location="Cubbon Park",
               story="Lovely evening", latitude="12.976000", longitude="77.592000", icon_url=""):
    return DateStory(
        id=id_,
        rating=rating,
        type_of_date=type_of_date,
        location=location,
        story=story,
        latitude=latitude,
        longitude=longitude,
        timestamp="2024-02-14T18:30:00.000Z",
        icon_url=icon_url,
    )


class FakeStore:
    """Stands in for the record store: records GET/POST calls, can be told to fail."""

    def __init__(self, stories=None):
        self.stories = list(stories or [])
        self.appended = []
        self.load_calls = 0
        self.fail_load = None
        self.fail_append = None

    def load(self):
        self.load_calls += 1
        if self.fail_load:
            raise self.fail_load
        return list(self.stories)

    def append(self, story):
        if self.fail_append:
            raise self.fail_append
        self.appended.append(story)
