"""Closed classifications returned by the Scryfall API.

Each enum lists the tags known at the time of writing. Values are the exact
wire strings; use ``scrybe.core.variants.parse_variant`` to read them so new
provider tags do not break parsing.
"""

from scrybe.core.variants import ProviderEnum


class Color(ProviderEnum):
    WHITE = "W"
    BLUE = "U"
    BLACK = "B"
    RED = "R"
    GREEN = "G"
    COLORLESS = "C"


class Layout(ProviderEnum):
    NORMAL = "normal"
    SPLIT = "split"
    FLIP = "flip"
    TRANSFORM = "transform"
    MODAL_DFC = "modal_dfc"
    MELD = "meld"
    LEVELER = "leveler"
    CLASS = "class"
    CASE = "case"
    SAGA = "saga"
    ADVENTURE = "adventure"
    MUTATE = "mutate"
    PROTOTYPE = "prototype"
    BATTLE = "battle"
    PLANAR = "planar"
    SCHEME = "scheme"
    VANGUARD = "vanguard"
    TOKEN = "token"
    DOUBLE_FACED_TOKEN = "double_faced_token"
    EMBLEM = "emblem"
    AUGMENT = "augment"
    HOST = "host"
    ART_SERIES = "art_series"
    REVERSIBLE_CARD = "reversible_card"


class BorderColor(ProviderEnum):
    BLACK = "black"
    BORDERLESS = "borderless"
    GOLD = "gold"
    SILVER = "silver"
    WHITE = "white"
    YELLOW = "yellow"


class Frame(ProviderEnum):
    Y1993 = "1993"
    Y1997 = "1997"
    Y2003 = "2003"
    Y2015 = "2015"
    FUTURE = "future"


class FrameEffect(ProviderEnum):
    LEGENDARY = "legendary"
    MIRACLE = "miracle"
    ENCHANTMENT = "enchantment"
    DRAFT = "draft"
    DEVOID = "devoid"
    TOMBSTONE = "tombstone"
    COLORSHIFTED = "colorshifted"
    INVERTED = "inverted"
    SUN_MOON_DFC = "sunmoondfc"
    COMPASS_LAND_DFC = "compasslanddfc"
    ORIGIN_PW_DFC = "originpwdfc"
    MOON_ELDRAZI_DFC = "mooneldrazidfc"
    WAXING_AND_WANING_MOON_DFC = "waxingandwaningmoondfc"
    SHOWCASE = "showcase"
    EXTENDED_ART = "extendedart"
    COMPANION = "companion"
    ETCHED = "etched"
    SNOW = "snow"
    LESSON = "lesson"
    SHATTERED_GLASS = "shatteredglass"
    CONVERT_DFC = "convertdfc"
    FAN_DFC = "fandfc"
    UPSIDE_DOWN_DFC = "upsidedowndfc"
    SPREE = "spree"
    FULL_ART = "fullart"
    NYXTOUCHED = "nyxtouched"


class Rarity(ProviderEnum):
    COMMON = "common"
    UNCOMMON = "uncommon"
    RARE = "rare"
    SPECIAL = "special"
    MYTHIC = "mythic"
    BONUS = "bonus"


class Legality(ProviderEnum):
    LEGAL = "legal"
    NOT_LEGAL = "not_legal"
    RESTRICTED = "restricted"
    BANNED = "banned"


class Format(ProviderEnum):
    """Keys of a card's ``legalities`` object."""

    STANDARD = "standard"
    FUTURE = "future"
    HISTORIC = "historic"
    TIMELESS = "timeless"
    GLADIATOR = "gladiator"
    PIONEER = "pioneer"
    EXPLORER = "explorer"
    MODERN = "modern"
    LEGACY = "legacy"
    PAUPER = "pauper"
    VINTAGE = "vintage"
    PENNY = "penny"
    COMMANDER = "commander"
    OATHBREAKER = "oathbreaker"
    STANDARD_BRAWL = "standardbrawl"
    BRAWL = "brawl"
    ALCHEMY = "alchemy"
    PAUPER_COMMANDER = "paupercommander"
    DUEL = "duel"
    OLDSCHOOL = "oldschool"
    PREMODERN = "premodern"
    PREDH = "predh"


class Finish(ProviderEnum):
    NONFOIL = "nonfoil"
    FOIL = "foil"
    ETCHED = "etched"


class Game(ProviderEnum):
    PAPER = "paper"
    ARENA = "arena"
    MTGO = "mtgo"


class ImageStatus(ProviderEnum):
    MISSING = "missing"
    PLACEHOLDER = "placeholder"
    LOWRES = "lowres"
    HIGHRES_SCAN = "highres_scan"


class SecurityStamp(ProviderEnum):
    OVAL = "oval"
    TRIANGLE = "triangle"
    ACORN = "acorn"
    CIRCLE = "circle"
    ARENA = "arena"
    HEART = "heart"


class PromoType(ProviderEnum):
    ALCHEMY = "alchemy"
    ARENALEAGUE = "arenaleague"
    BEGINNERBOX = "beginnerbox"
    BOOSTERFUN = "boosterfun"
    BOXTOPPER = "boxtopper"
    BRAWLDECK = "brawldeck"
    BRINGAFRIEND = "bringafriend"
    BUNDLE = "bundle"
    BUYABOX = "buyabox"
    COMMANDERPARTY = "commanderparty"
    CONCEPT = "concept"
    CONFETTIFOIL = "confettifoil"
    CONVENTION = "convention"
    DATESTAMPED = "datestamped"
    DOSSIER = "dossier"
    DOUBLEEXPOSURE = "doubleexposure"
    DOUBLERAINBOW = "doublerainbow"
    DRACULASERIES = "draculaseries"
    DRAFTWEEKEND = "draftweekend"
    DUELS = "duels"
    EMBOSSED = "embossed"
    EVENT = "event"
    FIRSTPLACEFOIL = "firstplacefoil"
    FNM = "fnm"
    FRACTUREFOIL = "fracturefoil"
    GALAXYFOIL = "galaxyfoil"
    GAMEDAY = "gameday"
    GIFTBOX = "giftbox"
    GILDED = "gilded"
    GLOSSY = "glossy"
    GODZILLASERIES = "godzillaseries"
    HALOFOIL = "halofoil"
    IMAGINE = "imagine"
    INSTORE = "instore"
    INTROPACK = "intropack"
    INVISIBLEINK = "invisibleink"
    JPWALKER = "jpwalker"
    JUDGEGIFT = "judgegift"
    LEAGUE = "league"
    MAGNIFIED = "magnified"
    MANAFOIL = "manafoil"
    MEDIAINSERT = "mediainsert"
    MOONLITLAND = "moonlitland"
    NEONINK = "neonink"
    OILSLICK = "oilslick"
    OPENHOUSE = "openhouse"
    PLANESWALKERDECK = "planeswalkerdeck"
    PLASTIC = "plastic"
    PLAYERREWARDS = "playerrewards"
    PLAYPROMO = "playpromo"
    PLAYTEST = "playtest"
    PORTRAIT = "portrait"
    POSTER = "poster"
    PREMIERESHOP = "premiereshop"
    PRERELEASE = "prerelease"
    PROMOPACK = "promopack"
    RAINBOWFOIL = "rainbowfoil"
    RAISEDFOIL = "raisedfoil"
    RAVNICACITY = "ravnicacity"
    REBALANCED = "rebalanced"
    RELEASE = "release"
    RESALE = "resale"
    RIPPLEFOIL = "ripplefoil"
    SCHINESEALTART = "schinesealtart"
    SCROLL = "scroll"
    SERIALIZED = "serialized"
    SETEXTENSION = "setextension"
    SETPROMO = "setpromo"
    SILVERFOIL = "silverfoil"
    SLDBONUS = "sldbonus"
    STAMPED = "stamped"
    STARTERCOLLECTION = "startercollection"
    STARTERDECK = "starterdeck"
    STEPANDCOMPLEAT = "stepandcompleat"
    STORECHAMPIONSHIP = "storechampionship"
    SURGEFOIL = "surgefoil"
    TEXTURED = "textured"
    THEMEPACK = "themepack"
    THICK = "thick"
    TOURNEY = "tourney"
    UPSIDEDOWN = "upsidedown"
    UPSIDEDOWNBACK = "upsidedownback"
    VAULT = "vault"
    WIZARDSPLAYNETWORK = "wizardsplaynetwork"


class SetType(ProviderEnum):
    CORE = "core"
    EXPANSION = "expansion"
    MASTERS = "masters"
    ETERNAL = "eternal"
    ALCHEMY = "alchemy"
    MASTERPIECE = "masterpiece"
    ARSENAL = "arsenal"
    FROM_THE_VAULT = "from_the_vault"
    SPELLBOOK = "spellbook"
    PREMIUM_DECK = "premium_deck"
    DUEL_DECK = "duel_deck"
    DRAFT_INNOVATION = "draft_innovation"
    TREASURE_CHEST = "treasure_chest"
    COMMANDER = "commander"
    PLANECHASE = "planechase"
    ARCHENEMY = "archenemy"
    VANGUARD = "vanguard"
    FUNNY = "funny"
    STARTER = "starter"
    BOX = "box"
    PROMO = "promo"
    TOKEN = "token"
    MEMORABILIA = "memorabilia"
    MINIGAME = "minigame"


class RulingSource(ProviderEnum):
    WOTC = "wotc"
    SCRYFALL = "scryfall"


class BulkKind(ProviderEnum):
    """``type`` of a bulk-data manifest entry."""

    ORACLE_CARDS = "oracle_cards"
    UNIQUE_ARTWORK = "unique_artwork"
    DEFAULT_CARDS = "default_cards"
    ALL_CARDS = "all_cards"
    RULINGS = "rulings"
