from pydantic import BaseModel, ConfigDict, Field


class UnitRecord(BaseModel):
    """Raw statistics of a single unit as exported from the game database."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str | None = Field(None, alias="Name", description="Display name of the unit")
    faction: str | None = Field(None, alias="Faction", description="Owning faction name")
    unit_class: str | None = Field(None, alias="Class", description="Unit class label")
    armor: float = Field(0, alias="Armor", ge=0)
    hp: float = Field(0, alias="HP", ge=0)
    morale: float = Field(0, alias="Morale", ge=0)
    missile_block_chance: float = Field(0, alias="Missile Block Chance", ge=0)
    melee_defense: float = Field(0, alias="Melee Defense", ge=0)
    melee_attack: float = Field(0, alias="Melee Attack", ge=0)
    base_damage: float = Field(0, alias="Base Damage", ge=0)
    charge_bonus: float = Field(0, alias="Charge Bonus", ge=0)
    ap_damage: float = Field(0, alias="AP Damage", ge=0)
    bonus_vs_infantry: float = Field(0, alias="Bonus vs Infantry", ge=0)
    range: float = Field(0, alias="Range", ge=0)
    base_missile_damage: float = Field(0, alias="Base Missile Damage", ge=0)
    accuracy: float = Field(0, alias="Accuracy", ge=0)
    ap_missile_damage: float = Field(0, alias="AP Missile Damage", ge=0)
    ammo: float = Field(0, alias="Ammo", ge=0)
    missile_damage: float = Field(0, alias="Missile Damage", ge=0)
