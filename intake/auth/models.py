from pydantic import BaseModel, ConfigDict, Field


class CallerIdentity(BaseModel):
    """Provider/team/location attributes of the authenticated uploader."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    provider_id: str = Field(default="", alias="providerId")
    team: str = Field(default="")
    team_id: str = Field(default="", alias="teamId")
    location_id: str = Field(default="", alias="locationId")

    def identity_values(self) -> list[str]:
        """Values stamped onto accepted rows, in label order."""
        return [self.provider_id, self.team, self.team_id, self.location_id]
