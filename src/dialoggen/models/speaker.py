from pydantic import BaseModel, ConfigDict


class SpeakerProfile(BaseModel):
    """One of the two characters taking part in a dialog."""
    model_config = ConfigDict(frozen=True)

    name: str = ""
    background: str = ""
    personality: str = ""
    motivations: str = ""
    speaking_style: str = ""
