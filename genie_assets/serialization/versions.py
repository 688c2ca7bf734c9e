# ==============================================================================
# GAME VERSION MODULE
# ==============================================================================
# Ordered enumeration of Genie engine releases.
#
# Entities compare against these values to include or exclude fields in
# their layout ("slp id only exists from the AoE beta on"). A field's
# meaning never changes between versions once it is present.
#
# Order follows release history:
#   NONE < TEST < MIK < DAVE < MATT < AOE_BETA < AOE < ROR
#        < AOK_E3 < AOK_ALPHA < AOK_BETA < AOK < TC < HD < DE2 < SWGB < CC
# ==============================================================================

from enum import IntEnum

from genie_assets.core.errors import UnsupportedVersion


class GameVersion(IntEnum):
    """Genie engine release, ordered oldest to newest."""
    NONE = 0
    TEST = 1        # earliest test builds
    MIK = 2
    DAVE = 3
    MATT = 4
    AOE_BETA = 5    # Age of Empires beta
    AOE = 6         # Age of Empires
    ROR = 7         # Rise of Rome
    AOK_E3 = 8      # Age of Kings E3 preview
    AOK_ALPHA = 9
    AOK_BETA = 10
    AOK = 11        # Age of Kings
    TC = 12         # The Conquerors
    HD = 13         # HD Edition
    DE2 = 14        # Definitive Edition (SMP sprites)
    SWGB = 15       # Star Wars: Galactic Battlegrounds
    CC = 16         # Clone Campaigns

    @classmethod
    def parse(cls, text) -> 'GameVersion':
        """
        Look up a version by name (case-insensitive) or numeric value.

        Raises:
            UnsupportedVersion: if nothing matches
        """
        if isinstance(text, cls):
            return text
        if isinstance(text, int):
            try:
                return cls(text)
            except ValueError:
                raise UnsupportedVersion(text) from None
        key = str(text).strip().upper().replace('-', '_')
        if key.isdigit():
            return cls.parse(int(key))
        try:
            return cls[key]
        except KeyError:
            raise UnsupportedVersion(text) from None

    def is_swgb(self) -> bool:
        """Star Wars titles use longer names in several tables."""
        return self >= GameVersion.SWGB
