"""Outfit board: the ordered list of outfits a user is composing."""

from .assets import MAX_GARMENTS_PER_OUTFIT, Asset, Garment, Outfit


MAX_OUTFITS = 3


class OutfitBoard:
    """Holds up to three outfits in display order."""

    def __init__(self, outfits: list[Outfit] | None = None):
        self.outfits: list[Outfit] = list(outfits or [])

    def get(self, outfit_id: str) -> Outfit:
        for outfit in self.outfits:
            if outfit.id == outfit_id:
                return outfit
        raise KeyError(outfit_id)

    def add_outfit(self) -> Outfit | None:
        """Append an empty outfit. Returns None once the board is full."""
        if len(self.outfits) >= MAX_OUTFITS:
            return None
        outfit = Outfit(name=f"Outfit {len(self.outfits) + 1}")
        self.outfits.append(outfit)
        return outfit

    def remove_outfit(self, outfit_id: str) -> None:
        self.outfits = [o for o in self.outfits if o.id != outfit_id]

    def move_outfit(self, from_index: int, to_index: int) -> None:
        """Reorder: take the outfit at ``from_index`` and insert it at ``to_index``."""
        if from_index == to_index:
            return
        outfit = self.outfits.pop(from_index)
        self.outfits.insert(to_index, outfit)

    def add_garment(self, outfit_id: str, asset: Asset) -> Garment | None:
        """Add a garment photo. Photos beyond the per-outfit limit are dropped."""
        outfit = self.get(outfit_id)
        if len(outfit.garments) >= MAX_GARMENTS_PER_OUTFIT:
            return None
        garment = Garment(original=asset)
        outfit.garments.append(garment)
        return garment

    def remove_garment(self, outfit_id: str, garment_id: str) -> None:
        outfit = self.get(outfit_id)
        outfit.garments = [g for g in outfit.garments if g.id != garment_id]
