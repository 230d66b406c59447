"""
Matched frame models.

Each precession theory is paired with the obliquity and nutation theories it
was published with.  ``FrameModels.create`` builds the triple for one epoch.
"""

import logging
from dataclasses import dataclass
from typing import Dict, Tuple

from core.constants import T_J2000
from ephemeris.nutation import Nutation, NutationModel
from ephemeris.obliquity import Obliquity, ObliquityModel
from ephemeris.precession import Precession, PrecessionModel

logger = logging.getLogger(__name__)


MATCHED_MODELS: Dict[PrecessionModel, Tuple[ObliquityModel, NutationModel]] = {
    PrecessionModel.VONDRAK_2011: (ObliquityModel.VONDRAK_2011, NutationModel.IAU2000),
    PrecessionModel.IAU_2009: (ObliquityModel.IAU_2006, NutationModel.IAU2006),
    PrecessionModel.IAU_2006: (ObliquityModel.IAU_2006, NutationModel.IAU2006),
    PrecessionModel.IAU_2000: (ObliquityModel.IAU_2006, NutationModel.IAU2000),
    PrecessionModel.WILLIAMS_1994: (ObliquityModel.WILLIAMS_1994, NutationModel.IAU1980),
    PrecessionModel.DE4XX: (ObliquityModel.WILLIAMS_1994, NutationModel.IAU1980),
    PrecessionModel.SIMON_1994: (ObliquityModel.SIMON_1994, NutationModel.IAU1980),
    PrecessionModel.LASKAR_1986: (ObliquityModel.LASKAR_1996, NutationModel.IAU1980),
    PrecessionModel.IAU_1976: (ObliquityModel.IAU_1976, NutationModel.IAU1980),
}


def parse_precession_model(name) -> PrecessionModel:
    """
    Resolve a precession model from its enum member, name or value.

    Raises
    ------
    ValueError
        If *name* matches no model.
    """
    if isinstance(name, PrecessionModel):
        return name
    key = str(name).strip()
    for model in PrecessionModel:
        if key.upper() == model.name or key.lower() == model.value:
            return model
    raise ValueError(
        f"Unknown precession model '{name}'. "
        f"Available: {', '.join(m.name for m in PrecessionModel)}"
    )


@dataclass(frozen=True)
class FrameModels:
    """Precession, obliquity and nutation for one epoch."""
    precession: Precession
    obliquity: Obliquity
    nutation: Nutation

    @classmethod
    def create(cls, precession_model: PrecessionModel, T: float) -> 'FrameModels':
        """
        Build the matched triple at T.

        The obliquity is evaluated at T for ecliptic precession models and at
        J2000 for equatorial ones, since the latter rotate to the equator
        before precessing.
        """
        obliquity_model, nutation_model = MATCHED_MODELS[precession_model]
        precession = Precession.create(precession_model, T)
        obliquity_T = T if precession.is_ecliptic else T_J2000
        obliquity = Obliquity.create(obliquity_model, obliquity_T)
        nutation = Nutation.create(nutation_model, T, obliquity)
        logger.debug("Frame models at T=%.8f: %s / %s / %s", T,
                     precession_model.name, obliquity_model.name, nutation_model.name)
        return cls(precession, obliquity, nutation)
