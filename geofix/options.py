from configparser import SectionProxy

from pydantic import BaseModel, ConfigDict, Field


class LocationOptions(BaseModel):
    """Tunables of the location manager.

    Every field may be changed at any time; the new value applies from the
    next decision that reads it.
    """

    model_config = ConfigDict(validate_assignment=True)

    # Accuracy radius in metres at which a sample ends acquisition. Negative
    # values can never be met, so acquisition then only ends on the deadline.
    desired_accuracy: float = -1.0
    # Deadline for one acquisition attempt, in seconds.
    querying_interval: float = Field(default=10.0, gt=0)
    # Accept samples of any age.
    use_cache: bool = True
    # Maximum sample age in seconds when use_cache is off.
    cache_age: float = Field(default=10.0, ge=0)
    update_location_on_application_did_become_active: bool = False
    loop: bool = False
    # Pause between a successful acquisition and the next one, in seconds.
    loop_time_interval: float = Field(default=10.0, gt=0)

    @classmethod
    def from_config(cls, section: SectionProxy | None) -> "LocationOptions":
        if section is None:
            return cls()

        values = {}
        for name, field in cls.model_fields.items():
            if name not in section:
                continue
            if field.annotation is bool:
                values[name] = section.getboolean(name)
            else:
                values[name] = section.getfloat(name)
        return cls(**values)
