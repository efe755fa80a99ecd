# app/app_shiny.py
from shiny import App, ui, render, reactive, req
import pandas as pd
import logging
import sys
from pathlib import Path

# --- make project root importable ---
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from hpadvisor.catalog import bivalent_points, building_types, grid_connections
from hpadvisor.errors import InputValidationError
from hpadvisor.heat_demand import calculate_default_dhw
from hpadvisor.models import validate_energy_data
from hpadvisor.pipeline import run_peak_analysis, run_savings, run_selection
from hpadvisor.sources import SyntheticPriceTempSource

logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")


# ---------------------------------------------------------------------
# UI
# ---------------------------------------------------------------------
app_ui = ui.page_sidebar(
    # 1) Sidebar MUST be first
    ui.sidebar(
        ui.h4("Building"),
        ui.input_select(
            "building_type", "Building type",
            {bt.id: bt.name for bt in building_types().values()},
        ),
        ui.input_numeric("unit_count", "Number of units", 40, min=1),
        ui.input_checkbox("is_coastal", "Coastal location (EC coating)", False),
        ui.input_select("grid_connection_id", "Grid connection", list(grid_connections().keys()), selected="3x80A"),

        ui.hr(),
        ui.h5("Yearly consumption"),
        ui.input_numeric("offtake", "Electricity offtake (kWh)", 600_000, min=0),
        ui.input_numeric("feed_in", "Electricity feed-in (kWh)", 180_000, min=0),
        ui.input_numeric("gas_m3", "Gas (m³)", 50_000, min=0),
        ui.input_numeric("dhw_liters", "Hot water (liters/day)", 4800, min=0),

        ui.hr(),
        ui.h5("Occupancy"),
        ui.input_slider("weekday_hours", "Weekday (h)", 0, 23, (7, 22)),
        ui.input_slider("weekend_hours", "Weekend (h)", 0, 23, (8, 23)),

        ui.hr(),
        ui.h5("Prices"),
        ui.input_numeric("gas_price", "Gas (€/m³)", 1.40, min=0, step=0.01),
        ui.input_numeric("elec_price", "Electricity (€/kWh)", 0.25, min=0, step=0.01),
        ui.input_numeric("feed_in_tariff", "Feed-in tariff (€/kWh)", 0.07, min=0, step=0.01),
        ui.input_numeric("feed_in_penalty", "Feed-in penalty (€/kWh)", 0.02, min=0, step=0.01),
        ui.input_checkbox("net_metering", "Net metering (saldering)", True),

        ui.hr(),
        ui.h5("Heat pump"),
        ui.input_select(
            "bivalent_point", "Bivalent point",
            {b.id: b.name for b in bivalent_points().values()},
        ),
        ui.input_checkbox("prefer_ht", "Prefer high temperature models", False),
        ui.input_numeric("weather_seed", "Placeholder weather seed", 42, min=0),

        ui.hr(),
        ui.input_action_button("run_btn", "Calculate", class_="btn-primary"),
    ),

    # 2) Global CSS injected into <head>
    ui.head_content(
        ui.tags.style(
            """
            body {
                font-size: 16px;
            }
            .kpi-table {
                font-size: 16px;
                border-collapse: collapse;
                width: 100%;
            }
            .kpi-table th, .kpi-table td {
                padding: 4px 8px;
            }
            /* Right-align the last column (values) */
            .kpi-table td:last-child {
                text-align: right;
            }
            """
        )
    ),

    # 3) Main page content
    ui.h2("Hybrid heat pump advisor"),
    ui.output_text("error_text"),
    ui.layout_columns(
        ui.card(
            ui.card_header("Heat demand"),
            ui.output_ui("heat_table"),
        ),
        ui.card(
            ui.card_header("Recommended heat pumps"),
            ui.output_ui("selection_table"),
        ),
        width=1/2,
    ),
    ui.card(
        ui.card_header("Savings (first recommendation)"),
        ui.output_ui("savings_table"),
    ),
    ui.output_plot("load_plot"),
    ui.layout_columns(
        ui.card(
            ui.card_header("Grid connection"),
            ui.output_ui("peak_table"),
        ),
        ui.card(
            ui.card_header("Tariff scenarios"),
            ui.output_ui("tariff_table"),
        ),
        width=1/2,
    ),
    ui.download_button("download_events", "Download exceedance events (CSV)"),
)


# ---------------------------------------------------------------------
# helpers
# ---------------------------------------------------------------------
def _kpi_html(rows: list[tuple[str, object]]) -> ui.HTML:
    df = pd.DataFrame(rows, columns=["metric", "value"])

    def fmt(v):
        if v is None:
            return "n/a"
        if isinstance(v, (int, float)):
            return f"{v:,.2f}"
        return str(v)

    df["value"] = df["value"].apply(fmt)
    html = df.to_html(
        index=False,
        classes="kpi-table table table-sm",
        border=0,
    )
    return ui.HTML(html)


# ---------------------------------------------------------------------
# server
# ---------------------------------------------------------------------
def server(input, output, session):

    # pre-fill hot water liters when building type or unit count changes
    @reactive.effect
    @reactive.event(input.building_type, input.unit_count)
    def _prefill_dhw():
        if input.unit_count() and int(input.unit_count()) > 0:
            ui.update_numeric(
                "dhw_liters",
                value=calculate_default_dhw(input.building_type(), int(input.unit_count())),
            )

    @reactive.calc
    @reactive.event(input.run_btn)
    def _energy_data():
        wd_start, wd_end = input.weekday_hours()
        we_start, we_end = input.weekend_hours()
        try:
            return validate_energy_data(
                building_type=input.building_type(),
                unit_count=input.unit_count(),
                is_coastal=input.is_coastal(),
                grid_connection_id=input.grid_connection_id(),
                electricity_offtake_kwh=input.offtake(),
                electricity_feed_in_kwh=input.feed_in(),
                gas_m3=input.gas_m3(),
                dhw_liters_per_day=input.dhw_liters(),
                occupancy_weekday_start=wd_start,
                occupancy_weekday_end=wd_end,
                occupancy_weekend_start=we_start,
                occupancy_weekend_end=we_end,
                gas_price_per_m3=input.gas_price(),
                electricity_price_per_kwh=input.elec_price(),
                feed_in_tariff_per_kwh=input.feed_in_tariff(),
                feed_in_penalty_per_kwh=input.feed_in_penalty(),
                net_metering_enabled=input.net_metering(),
                bivalent_point=input.bivalent_point(),
            )
        except InputValidationError as exc:
            return exc

    @reactive.calc
    def _selection():
        data = _energy_data()
        req(not isinstance(data, InputValidationError))
        heat, selection = run_selection(data, prefer_ht=input.prefer_ht())
        return data, heat, selection

    @reactive.calc
    def _analysis():
        data, heat, selection = _selection()
        req(selection.has_recommendation)
        choice = selection.recommendations[0]
        savings = run_savings(data, heat, choice.model, choice.units_needed)
        source = SyntheticPriceTempSource(seed=int(input.weather_seed() or 0))
        peak = run_peak_analysis(data, choice.model, choice.units_needed, source)
        return choice, savings, peak

    # -------------------- outputs --------------------
    @output
    @render.text
    def error_text():
        data = _energy_data()
        if isinstance(data, InputValidationError):
            return "Cannot calculate: " + "; ".join(f"{f} ({m})" for f, m in data.failures)
        _, _, selection = _selection()
        if not selection.has_recommendation:
            return "No heat pump in the catalog fits this building."
        return ""

    @output
    @render.ui
    def heat_table():
        _, heat, selection = _selection()
        return _kpi_html([
            ("Total heat demand (kWh)", heat.total_heat_demand_kwh),
            ("Space heating (kWh)", heat.space_heating_kwh),
            ("Hot water (kWh)", heat.hot_water_kwh),
            ("Required peak power (kW)", heat.required_power_kw),
            ("Required heat pump capacity (kW)", selection.required_capacity_kw),
            ("Heat pump coverage (%)", selection.coverage_percent),
            ("Current energy cost (€)", heat.total_current_eur),
        ])

    @output
    @render.ui
    def selection_table():
        _, _, selection = _selection()
        rows = [
            (f"{o.units_needed} x {o.model.name}", o.total_price)
            for o in selection.recommendations
        ]
        return _kpi_html(rows or [("No suitable model", None)])

    @output
    @render.ui
    def savings_table():
        choice, s, _ = _analysis()
        return _kpi_html([
            ("Model", f"{choice.units_needed} x {choice.model.name}"),
            ("Annual savings (€)", s.annual_savings_eur),
            ("Savings (%)", s.savings_percent),
            ("CO₂ reduction (kg)", s.co2_reduction_kg),
            ("Payback (years)", s.payback_years),
        ])

    @output
    @render.plot
    def load_plot():
        import matplotlib.pyplot as plt

        _, _, peak = _analysis()
        daily = peak.combined[["building_kW", "hp_kW", "combined_kW"]].resample("D").max()
        fig, ax = plt.subplots()
        ax.plot(daily.index, daily["building_kW"], label="Building")
        ax.plot(daily.index, daily["hp_kW"], label="Heat pump")
        ax.plot(daily.index, daily["combined_kW"], label="Combined")
        ax.axhline(peak.peak.connection_capacity_kw, color="red", linestyle="--", label="Connection")
        ax.set_xlabel("Day")
        ax.set_ylabel("Daily peak load (kW)")
        ax.set_title("Load profile against grid connection")
        ax.legend()
        return fig

    @output
    @render.ui
    def peak_table():
        _, _, a = _analysis()
        p, t = a.peak, a.temperature
        return _kpi_html([
            ("Peak load (kW)", p.peak_power_kw),
            ("Connection capacity (kW)", p.connection_capacity_kw),
            ("Exceedance hours", p.exceedance_count),
            ("Exceedance (%)", p.exceedance_percent),
            ("Longest exceedance (h)", p.max_exceedance_duration_hours),
            ("Median exceedance (min)", p.median_exceedance_duration_min),
            ("Temperature at exceedance, min (°C)", t.min_temp_c if t.count else None),
            ("Temperature at exceedance, max (°C)", t.max_temp_c if t.count else None),
            ("Boiler fallback extra gas (m³)", a.hybrid.extra_gas_m3),
        ])

    @output
    @render.ui
    def tariff_table():
        data, _, _ = _selection()
        _, _, a = _analysis()
        sal = a.saldering.net_metering if data.net_metering_enabled else a.saldering.no_net_metering
        dyn = a.dynamic_pricing.net_metering if data.net_metering_enabled else a.dynamic_pricing.no_net_metering
        return _kpi_html([
            ("Feed-in net, without HP (€)", sal.without_hp.net_eur),
            ("Feed-in net, with HP (€)", sal.with_hp.net_eur),
            ("Self consumption benefit (€)", a.saldering.self_consumption_benefit_eur),
            ("Fixed tariff, with HP (€)", dyn.with_hp.fixed_eur),
            ("Dynamic tariff, with HP (€)", dyn.with_hp.dynamic_eur),
            ("Smart steering savings (€)", a.steering.savings_eur),
            ("Shifted (kWh)", a.steering.shifted_kwh),
        ])

    @output
    @render.download(filename="exceedance_events.csv")
    def download_events():
        _, _, a = _analysis()
        return a.events.to_csv(index=False).encode("utf-8")


app = App(app_ui, server)
