"""
Topic ruleset used to tag news items.

Each topic carries a display label, the keyword substrings that mark an item
as belonging to it (matched case-insensitively), and the reference passages
the frontend shows next to the tagged cards.  The ruleset is static and the
insertion order of ``TOPICS`` is the order topics are reported in.
"""

from dataclasses import dataclass
from typing import Dict, Tuple


@dataclass(frozen=True)
class Verse:
    ref: str
    text: str


@dataclass(frozen=True)
class Topic:
    id: str
    label: str
    keywords: Tuple[str, ...]
    verses: Tuple[Verse, ...]


_TOPIC_LIST = (
    Topic(
        id="israel",
        label="Israel & Jerusalem",
        keywords=("israel", "jerusalem", "gaza", "west bank", "idf", "hezbollah", "hamas", "iran"),
        verses=(
            Verse("Zechariah 12:2-3", "Behold, I will make Jerusalem a cup of trembling... all the people of the earth be gathered together against it."),
            Verse("Luke 21:20", "And when ye shall see Jerusalem compassed with armies, then know that the desolation thereof is nigh."),
        ),
    ),
    Topic(
        id="wars",
        label="Wars & Rumours of Wars",
        keywords=("war", "invasion", "missile", "artillery", "offensive", "strike", "conflict", "troops", "border clash"),
        verses=(
            Verse("Matthew 24:6-7", "And ye shall hear of wars and rumours of wars... For nation shall rise against nation..."),
        ),
    ),
    Topic(
        id="disasters",
        label="Earthquakes & Disasters",
        keywords=("earthquake", "famine", "pestilence", "outbreak", "pandemic", "wildfire", "hurricane", "flooding", "volcano"),
        verses=(
            Verse("Matthew 24:7", "...and there shall be famines, and pestilences, and earthquakes, in divers places."),
        ),
    ),
    Topic(
        id="persecution",
        label="Persecution of Believers",
        keywords=("church attack", "christian", "pastor arrested", "blasphemy law", "religious persecution"),
        verses=(
            Verse("Matthew 24:9", "Then shall they deliver you up to be afflicted, and shall kill you..."),
            Verse("Revelation 6:9", "I saw under the altar the souls of them that were slain for the word of God..."),
        ),
    ),
    Topic(
        id="deception",
        label="Deception & False Christs",
        keywords=("disinformation", "deepfake", "false christ", "propaganda", "messiah claimant", "cult leader"),
        verses=(
            Verse("Matthew 24:4-5", "Take heed that no man deceive you. For many shall come in my name..."),
        ),
    ),
    Topic(
        id="tech_control",
        label="Control Tech / Economy",
        keywords=("digital id", "central bank digital currency", "cbdc", "biometric", "surveillance", "cashless", "implant", "microchip", "mark"),
        verses=(
            Verse("Revelation 13:16-17", "And he causeth all... to receive a mark... that no man might buy or sell, save he that had the mark..."),
        ),
    ),
    Topic(
        id="globalism",
        label="Global Governance",
        keywords=("global treaty", "world health", "un resolution", "global tax", "international court", "one world"),
        verses=(
            Verse("Daniel 7:23-25", "...the fourth beast shall be the fourth kingdom upon earth... and shall devour the whole earth..."),
            Verse("Revelation 13:7", "...power was given him over all kindreds, and tongues, and nations."),
        ),
    ),
)

TOPICS: Dict[str, Topic] = {topic.id: topic for topic in _TOPIC_LIST}
