# sinjoh

Tools for exploring the data files of Pokémon Platinum.

The package reads Nintendo DS NARC archives and parses several of the
game's field data formats: area data, area lights, area map props and
BDHC collision data. Area data, area lights and area map props can be
loaded into SQLite, either for an interactive SQL session or exported to
a database file.

## Installation

```
pip install .
```

## Command line

The `sinjoh` command needs three of the game's NARC files. Point it at a
built checkout of the Pokémon Platinum decompilation repository:

```
sinjoh --pokeplatinum-repo-path /path/to/pokeplatinum sql repl
```

With a repository path the files are looked up at:

- `build/res/field/area_data/area_data.narc`
- `build/res/field/lighting/lighting.narc`
- `build/res/field/props/model_sets/prop_model_sets.narc`

Alternatively, give all three paths yourself with
`--area-data-narc-path`, `--area-light-narc-path` and
`--area-build-narc-path`. These options cannot be combined with
`--pokeplatinum-repo-path`, and all three must be given together.

Start an interactive SQL session over an in-memory database:

```
sinjoh --pokeplatinum-repo-path /path/to/pokeplatinum sql repl
```

Each line entered is run as one SQL statement and its rows are printed as
a table (`NULL` shows as `<null>`, blobs as `<N bytes blob>`). The session
ends on end of input or Ctrl-C; SQL errors are logged and the session
goes on.

Export everything to a SQLite database file (an existing file is
overwritten):

```
sinjoh --pokeplatinum-repo-path /path/to/pokeplatinum sql export game.sqlite
```

Logging is at INFO level by default; `-v` makes it more verbose and `-q`
quieter, and both can be repeated. The command exits with status 1 when
the data files cannot be loaded or the database cannot be written.

Run `sinjoh --help` for all options.

### Tables

- `area_data` — one row per area data file.
- `area_light` — one row per area light block (`id`, `end_time`).
- `area_light_properties` — the enabled lights of each block, with color
  and direction.
- `area_light_color` — the diffuse, ambient, specular and emission
  colors of each block.
- `area_map_prop` — the map prop IDs of each area.

## Library use

```python
from sinjoh.narc import NarcReader
from sinjoh.area_light import AreaLight

with NarcReader.read_from_file("lighting.narc") as reader:
    for raw in reader.files_iter():
        light = AreaLight.parse_bytes(raw)
        light.fix()
        print(len(light.blocks))
```

`NarcReader.read_from_file` takes an optional `NarcReaderFlags` to skip
the magic number or byte order mark checks. Other parsers are
`sinjoh.area_data.AreaData.from_bytes`,
`sinjoh.area_map_props.AreaMapProps.parse_bytes` and
`sinjoh.bdhc.Bdhc.parse_bytes`. Fixed-point values are represented by
`sinjoh.nds.DsFixed16` and `sinjoh.nds.DsFixed32`.

`sinjoh.loader.load_resources` reads the three supported NARC files at
once, `sinjoh.database.export_resources` writes them to a SQLite file,
and `sinjoh.database.SqlRepl` runs queries against them, returning a
`QueryResult` whose `render()` gives the printed table.

## Limitations

- Only area data, area lights and area map props are loaded and put into
  SQLite. BDHC data can be parsed with `sinjoh.bdhc`, but the command does
  not read land data, map matrices, map headers, map prop animation lists
  or map prop material and shape data, and there are no tables for them.
- File names stored in a NARC's file name table are not read; files are
  only accessed by index.