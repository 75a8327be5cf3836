"""Lookup tables used when rendering flights for humans."""

from __future__ import annotations

# ICAO aircraft type designator -> marketing model name.
AIRCRAFT_MODELS: dict[str, str] = {
    "A19N": "Airbus A319neo",
    "A20N": "Airbus A320neo",
    "A21N": "Airbus A321neo",
    "A318": "Airbus A318",
    "A319": "Airbus A319",
    "A320": "Airbus A320",
    "A321": "Airbus A321",
    "A332": "Airbus A330-200",
    "A333": "Airbus A330-300",
    "A338": "Airbus A330-800neo",
    "A339": "Airbus A330-900neo",
    "A343": "Airbus A340-300",
    "A346": "Airbus A340-600",
    "A359": "Airbus A350-900",
    "A35K": "Airbus A350-1000",
    "A388": "Airbus A380-800",
    "AT45": "ATR 42-500",
    "AT72": "ATR 72",
    "AT75": "ATR 72-500",
    "AT76": "ATR 72-600",
    "B712": "Boeing 717-200",
    "B733": "Boeing 737-300",
    "B734": "Boeing 737-400",
    "B735": "Boeing 737-500",
    "B736": "Boeing 737-600",
    "B737": "Boeing 737-700",
    "B738": "Boeing 737-800",
    "B739": "Boeing 737-900",
    "B37M": "Boeing 737 MAX 7",
    "B38M": "Boeing 737 MAX 8",
    "B39M": "Boeing 737 MAX 9",
    "B3XM": "Boeing 737 MAX 10",
    "B744": "Boeing 747-400",
    "B748": "Boeing 747-8",
    "B752": "Boeing 757-200",
    "B753": "Boeing 757-300",
    "B762": "Boeing 767-200",
    "B763": "Boeing 767-300",
    "B764": "Boeing 767-400",
    "B772": "Boeing 777-200",
    "B77L": "Boeing 777-200LR",
    "B773": "Boeing 777-300",
    "B77W": "Boeing 777-300ER",
    "B788": "Boeing 787-8 Dreamliner",
    "B789": "Boeing 787-9 Dreamliner",
    "B78X": "Boeing 787-10 Dreamliner",
    "BCS1": "Airbus A220-100",
    "BCS3": "Airbus A220-300",
    "C172": "Cessna 172 Skyhawk",
    "C208": "Cessna 208 Caravan",
    "C25A": "Cessna Citation CJ2",
    "C560": "Cessna Citation V",
    "CL60": "Bombardier Challenger 600",
    "CRJ2": "Bombardier CRJ200",
    "CRJ7": "Bombardier CRJ700",
    "CRJ9": "Bombardier CRJ900",
    "CRJX": "Bombardier CRJ1000",
    "DH8D": "De Havilland Canada Dash 8-400",
    "E170": "Embraer E170",
    "E175": "Embraer E175",
    "E190": "Embraer E190",
    "E195": "Embraer E195",
    "E290": "Embraer E190-E2",
    "E295": "Embraer E195-E2",
    "E35L": "Embraer Legacy 600",
    "E55P": "Embraer Phenom 300",
    "GLEX": "Bombardier Global Express",
    "GLF6": "Gulfstream G650",
    "MD11": "McDonnell Douglas MD-11",
    "PC12": "Pilatus PC-12",
    "SF34": "Saab 340",
    "SU95": "Sukhoi Superjet 100",
}

# ICAO airline designator -> airline name.
AIRLINE_NAMES: dict[str, str] = {
    "AAL": "American Airlines",
    "ACA": "Air Canada",
    "AFR": "Air France",
    "AUA": "Austrian Airlines",
    "AZA": "ITA Airways",
    "BAW": "British Airways",
    "BEL": "Brussels Airlines",
    "BTI": "airBaltic",
    "CCA": "Air China",
    "CPA": "Cathay Pacific",
    "CSN": "China Southern Airlines",
    "DAL": "Delta Air Lines",
    "DLH": "Lufthansa",
    "EIN": "Aer Lingus",
    "ENT": "Enter Air",
    "EWG": "Eurowings",
    "EZY": "easyJet",
    "FDX": "FedEx",
    "FIN": "Finnair",
    "IBE": "Iberia",
    "JBU": "JetBlue",
    "KLM": "KLM Royal Dutch Airlines",
    "LOT": "LOT Polish Airlines",
    "NAX": "Norwegian Air Shuttle",
    "QFA": "Qantas",
    "QTR": "Qatar Airways",
    "RYR": "Ryanair",
    "SAS": "Scandinavian Airlines",
    "SIA": "Singapore Airlines",
    "SWA": "Southwest Airlines",
    "SWR": "Swiss International Air Lines",
    "TAP": "TAP Air Portugal",
    "THY": "Turkish Airlines",
    "UAE": "Emirates",
    "UAL": "United Airlines",
    "UPS": "UPS Airlines",
    "VIR": "Virgin Atlantic",
    "VLG": "Vueling",
    "WZZ": "Wizz Air",
}

__all__ = ["AIRCRAFT_MODELS", "AIRLINE_NAMES"]
