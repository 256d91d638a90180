"""Metadata element names and controlled values of the EZID metadata profiles.

Members are strings, so they can be used directly as metadata record keys and values::

    metadata = {
        InternalProfile.TARGET: "https://example.org/landing",
        InternalProfile.PROFILE: "datacite",
        DataCiteProfile.TITLE: "Survey results",
        DataCiteProfile.RESOURCE_TYPE: DataCiteResourceType.DATASET,
    }
"""

from enum import Enum


class _ProfileValue(str, Enum):
    """String enumeration that formats as its value."""

    def __str__(self) -> str:
        return str(self.value)


class InternalProfile(_ProfileValue):
    """EZID internal metadata elements and the response status tokens."""

    OWNER = "_owner"
    OWNER_GROUP = "_ownergroup"
    CO_OWNERS = "_coowners"
    CREATED = "_created"
    UPDATED = "_updated"
    TARGET = "_target"
    SHADOWS = "_shadows"
    SHADOWED_BY = "_shadowedby"
    PROFILE = "_profile"
    EXPORT = "_export"
    STATUS = "_status"
    # Response status tokens
    ERROR = "error"
    SUCCESS = "success"


class InternalProfileValue(_ProfileValue):
    """Values of the ``_export`` and ``_status`` elements."""

    YES = "yes"
    NO = "no"
    PUBLIC = "public"
    RESERVED = "reserved"
    UNAVAILABLE = "unavailable"


class DataCiteProfile(_ProfileValue):
    """DataCite profile elements."""

    CREATOR = "datacite.creator"
    TITLE = "datacite.title"
    PUBLISHER = "datacite.publisher"
    PUBLICATION_YEAR = "datacite.publicationyear"
    RESOURCE_TYPE = "datacite.resourcetype"


class DataCiteResourceType(_ProfileValue):
    """Values of the ``datacite.resourcetype`` element."""

    COLLECTION = "Collection"
    DATASET = "Dataset"
    EVENT = "Event"
    FILM = "Film"
    IMAGE = "Image"
    INTERACTIVE_RESOURCE = "InteractiveResource"
    MODEL = "Model"
    PHYSICAL_OBJECT = "PhysicalObject"
    SERVICE = "Service"
    SOFTWARE = "Software"
    SOUND = "Sound"
    TEXT = "Text"


class DublinCoreProfile(_ProfileValue):
    """Dublin Core profile elements."""

    CREATOR = "dc.creator"
    TITLE = "dc.title"
    PUBLISHER = "dc.publisher"
    DATE = "dc.date"
    TYPE = "dc.type"


class ErcProfile(_ProfileValue):
    """ERC (Electronic Resource Citation) profile elements."""

    WHO = "erc.who"
    WHAT = "erc.what"
    WHEN = "erc.when"


class ErcMissingValueCode(_ProfileValue):
    """ERC codes that stand in for a missing value."""

    INACCESSIBLE = "(:unac)"
    UNALLOWED = "(:unal)"
    NOT_APPLICABLE = "(:unap)"
    UNASSIGNED = "(:unas)"
    UNAVAILABLE = "(:unav)"
    UNKNOWN = "(:unkn)"
    NONE = "(:none)"
    NULL = "(:null)"
    TBA = "(:tba)"
    ETAL = "(:etal)"
    AT = "(:at)"
